import sys

import numpy as np
import simpy

# Configuration
from config import load_simulation_config

# Simulator components
from simulator.infrastructure.message_broker import MessageBroker
from simulator.infrastructure.realtime_env import RealtimeEnvironment

# Controller
from controller.building_controller import BuildingController

# Analyzer
from analyzer.statistics import Statistics

DEFAULT_CONFIG_PATH = "default"


def run_simulation(sim_config_path=DEFAULT_CONFIG_PATH, event_log_path=None, diagram_path=None):
    """
    Set up and run the entire simulation

    Args:
        sim_config_path: Scenario YAML path, or the name of a shipped scenario
        event_log_path: Where to write the JSON Lines event log (None = skip)
        diagram_path: Where to save the trajectory diagram (None = skip)

    Returns:
        (controller, statistics) after the run
    """
    print("--- Loading Configuration ---")
    sim_config = load_simulation_config(sim_config_path)
    print(f"Simulation Config: {sim_config_path}")

    if sim_config.random_seed is not None:
        print(f"Random seed fixed to {sim_config.random_seed} for reproducible results")
    else:
        print("Random seed not set - results will vary")
    rng = np.random.default_rng(sim_config.random_seed)

    print("\n--- Simulation Setup ---")
    if sim_config.seconds_per_tick > 0:
        env = RealtimeEnvironment(seconds_per_tick=sim_config.seconds_per_tick)
    else:
        env = simpy.Environment()
    broker = MessageBroker(env)

    statistics = Statistics(env, broker.get_broadcast_pipe())
    statistics.set_simulation_metadata(sim_config.to_dict())
    env.process(statistics.start_listening())

    controller = BuildingController("Controller", broker)
    if not controller.try_initialize_building(
            sim_config.building.num_floors,
            sim_config.building.num_elevators,
            sim_config.building.capacity,
            terminal_wait_ticks=sim_config.timing.terminal_wait_ticks,
            door_open_ticks=sim_config.timing.door_open_ticks):
        raise SystemExit("Building could not be initialized, check the building section of the config")

    env.process(controller.listen_for_commands())
    run_process = env.process(controller.run(
        duration_ticks=sim_config.traffic.duration_ticks,
        events=sim_config.events,
        request_rate=sim_config.traffic.request_rate,
        stop_at_tick=sim_config.traffic.stop_at_tick,
        rng=rng,
    ))

    print("\n--- Simulation Start ---")
    env.run(until=run_process)
    # let the recorder drain the last messages of the final tick
    env.run(until=env.now + 1)
    print("\n--- Simulation End ---")

    controller.building.print_elevator_statuses()
    statistics.print_summary()

    if event_log_path:
        statistics.save_event_log(event_log_path)
    if diagram_path:
        statistics.plot_trajectory_diagram(diagram_path)

    return controller, statistics


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    sim_config_path = argv[0] if len(argv) > 0 else DEFAULT_CONFIG_PATH
    event_log_path = argv[1] if len(argv) > 1 else None
    diagram_path = argv[2] if len(argv) > 2 else None
    run_simulation(sim_config_path, event_log_path=event_log_path, diagram_path=diagram_path)


if __name__ == '__main__':
    main()
