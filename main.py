# main.py
"""
Main entry point for the Firework Particles simulation.

This script orchestrates the entire simulation lifecycle:
1. Loads configuration from `config.json`.
2. Initializes the logging system.
3. Sets up the window, the simulation state and the particle pool.
4. Runs the frame loop, one simulation step per display refresh.
5. Handles clean shutdown.
"""
import logging
from utils import setup_logging, load_config
import cProfile
import pstats
import io

from constants import FPS

def main():
    """
    The main function to run the simulation.
    """
    # Load configuration from the JSON file first.
    # Logging is not set up yet, so we use a print for this one error.
    try:
        config = load_config('config.json')
    except Exception as e:
        print(f"FATAL: Could not load config.json. Error: {e}")
        return

    setup_logging(config)

    logging.info("--- Firework Particles Simulation Starting ---")

    sim_params = config.get('simulation_parameters', {})
    run_params = config.get('run_control', {})
    vis_params = config.get('visualization', {})

    from simulation import Simulation
    from state import SimulationState
    from visualization import Visualizer

    # --- Component Initialization ---
    # 1. Initialize the visualizer first. It determines the viewport size.
    visualizer = Visualizer(vis_params)

    # 2. Build the state and the simulation around that viewport.
    state = SimulationState(visualizer.width, visualizer.height)
    sim = Simulation(sim_params)

    profiler = cProfile.Profile() if run_params.get('profile', False) else None

    log_throttle = run_params.get('log_throttle_steps', 300)
    max_steps = run_params.get('max_steps', 0) # 0 runs until the window is closed

    running = True
    step_num = 0

    if profiler:
        profiler.enable()
    while running:
        # Input events mutate the state between frames.
        if not visualizer.poll_events(sim, state):
            break

        sim.metrics.start_frame()
        if not state.is_paused:
            sim.step(state, visualizer.canvas)
            visualizer.canvas.present()
        sim.metrics.end_frame(len(state.particles))

        visualizer.clock.tick(FPS)
        step_num += 1

        # Hot loops must throttle logs
        if step_num % log_throttle == 0:
            logging.info(
                f"Frame {step_num} | Particles: {len(state.particles)} | "
                f"FPS: {sim.metrics.fps()} | Score: {state.score}"
            )
            logging.debug(f"Frame {step_num} | Hue: {state.hue:.1f} | Target: {state.target is not None}")

        if max_steps and step_num >= max_steps:
            logging.info(f"Reached max_steps ({max_steps}). Stopping simulation.")
            running = False
    if profiler:
        profiler.disable()

    visualizer.close()
    logging.info("Simulation loop finished.")

    if profiler:
        logging.info("--- Performance Profile ---")
        s = io.StringIO()
        # Sort by cumulative time spent in the function
        stats = pstats.Stats(profiler, stream=s).sort_stats('cumtime')
        stats.print_stats(20) # Print top 20 slowest functions
        logging.info(f"\n{s.getvalue()}")

    logging.info("--- Firework Particles Simulation Shutting Down ---")


if __name__ == "__main__":
    main()
