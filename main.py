# main.py
import os
import psutil # For memory monitoring
import logging
import cProfile
import argparse # For command line arguments

from config import config, ConfigurationError # Use the global config instance
from physics_utils import PhysicsError
from solarsystem import SceneContext, advance_all, build_solar_system
from visualization import Visualization

class OrreryApp:
    """Runs the solar-system orrery: builds the scene, then animates and draws it.

    The application owns one `SceneContext` (bodies, scene graph, random
    source) and one `Visualization`. Each frame it:
    1.  Processes window events; closing the window or pressing Escape ends the run.
    2.  Advances every body by one frame with `advance_all`.
    3.  Renders the scene.
    4.  Periodically checks memory usage via `psutil`.

    Attributes:
        ctx (SceneContext): The scene being animated.
        visualization (Visualization): Window, camera and renderer.
        running (bool): Cleared by user input or a critical error.
        process (psutil.Process): Current process, for memory monitoring.
    """
    def __init__(self, seed: int = None, headless: bool = False):
        """Builds the solar system, opens the window and loads textures.

        Args:
            seed (int, optional): Seed for initial phases and the asteroid belt.
            headless (bool): Render through SDL's dummy video driver.

        Raises:
            ConfigurationError: If configuration prevents setting up the window.
            PhysicsError: If the configured bodies or belt are invalid.
        """
        try:
            self.ctx: SceneContext = build_solar_system(seed=seed)
            self.visualization = Visualization(headless=headless)
            self.visualization.resolve_textures(self.ctx)
        except (ConfigurationError, PhysicsError) as e:
            logging.critical(f"Failed to initialize OrreryApp: {e}", exc_info=True)
            raise
        except Exception as e:
            logging.critical(f"An unexpected error occurred during OrreryApp initialization: {e}", exc_info=True)
            raise

        self.running = True
        self.process = psutil.Process(os.getpid())
        logging.info(f"OrreryApp initialized (seed={seed}, headless={headless}).")

    def check_memory(self):
        try:
            memory_mb = self.process.memory_info().rss / (1024 * 1024)
            if memory_mb > config.Monitoring.MEMORY_USAGE_WARN_MB:
                logging.warning(f"High memory usage: {memory_mb:.2f} MB at frame {self.ctx.frame_count}")
            elif config.Debug.DEBUG_MODE:
                logging.debug(f"Memory usage: {memory_mb:.2f} MB at frame {self.ctx.frame_count}")
        except psutil.Error as e_psutil:
            logging.error(f"Could not retrieve memory usage: {e_psutil}", exc_info=True)

    def step(self) -> bool:
        """Runs one frame. Returns `False` once the user has asked to quit."""
        if not self.visualization.handle_events():
            self.running = False
            logging.info("Orrery stopped by user (visualization window closed).")
            return False

        advance_all(self.ctx)

        try:
            self.visualization.render(self.ctx)
        except Exception as e_render:
            logging.error(f"Error during visualization rendering: {e_render}", exc_info=True)

        if self.ctx.frame_count % config.Monitoring.MEMORY_CHECK_INTERVAL_FRAMES == 0:
            self.check_memory()
        return True

    def run(self, max_frames: int = None) -> int:
        """
        Animates until the window closes or `max_frames` frames have run.

        Args:
            max_frames (int, optional): Frame limit. `None` runs until the user quits.

        Returns:
            int: Number of frames run.
        """
        frames = 0
        if max_frames is None and not self.visualization.visualization_enabled:
            logging.critical("No display available and no frame limit given; refusing to run an unbounded loop.")
            self.running = False
            self.visualization.close()
            return frames
        logging.info(f"Starting orrery loop (max_frames={max_frames}).")
        try:
            while self.running and (max_frames is None or frames < max_frames):
                if not self.step():
                    break
                frames += 1
        except Exception as e_loop:
            logging.critical(f"Unhandled error in orrery loop at frame {frames}: {e_loop}", exc_info=True)
            self.running = False
        finally:
            self.visualization.close()
        logging.info(f"Orrery loop finished after {frames} frames.")
        return frames


def main(argv=None):
    """Command-line entry point.

    Flags:
        --profile: Run under cProfile and save statistics to 'orrery_profile.prof'.
        --seed N: Seed the random phases and the asteroid belt.
        --max-frames N: Stop after N frames.
        --headless: Use SDL's dummy video driver (no window).
    """
    parser = argparse.ArgumentParser(description="Run the solar-system orrery.")
    parser.add_argument(
        "--profile",
        action="store_true",
        help="Enable profiling. Statistics will be saved to 'orrery_profile.prof'."
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed for planet phases and the asteroid belt.")
    parser.add_argument("--max-frames", type=int, default=None, help="Stop after this many frames.")
    parser.add_argument("--headless", action="store_true", help="Render without opening a window.")
    args = parser.parse_args(argv)

    profiler = None
    if args.profile:
        profiler = cProfile.Profile()
        profiler.enable()
        logging.info("cProfile profiling enabled. Output will be saved to orrery_profile.prof upon completion.")

    try:
        logging.info("Initializing OrreryApp...")
        app = OrreryApp(seed=args.seed, headless=args.headless)
        app.run(max_frames=args.max_frames)
    except ConfigurationError as e_config_main:
        logging.critical(f"Orrery could not be initialized or run due to a ConfigurationError: {e_config_main}", exc_info=True)
        print(f"FATAL CONFIGURATION ERROR: {e_config_main}. Orrery cannot start. Check logs for details.")
    except Exception as e_main:
        logging.critical(f"An unexpected critical error occurred in the main execution block: {e_main}", exc_info=True)
        print(f"FATAL UNEXPECTED ERROR: {e_main}. Orrery terminated. Check logs for details.")
    finally:
        if profiler:
            profiler.disable()
            stats_file = "orrery_profile.prof"
            try:
                profiler.dump_stats(stats_file)
                logging.info(f"Profiling data successfully saved to {stats_file}")
            except OSError as e_profile_dump:
                logging.error(f"Failed to save profiling data to {stats_file}: {e_profile_dump}", exc_info=True)

        logging.info("Orrery terminated.")


if __name__ == "__main__":
    main()
