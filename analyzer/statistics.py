import json
from datetime import datetime

import matplotlib.pyplot as plt
import numpy as np

from controller.building_controller import BuildingController


class Statistics:
    """
    Receives all broker traffic as an independent "recorder".

    Keeps the last building status of every tick, counts accepted and
    rejected requests, and collects every message in JSON Lines form for
    offline playback.
    """

    STATUS_TOPIC = BuildingController.STATUS_TOPIC
    REQUEST_TOPIC = BuildingController.REQUEST_TOPIC
    ERROR_TOPIC = BuildingController.ERROR_TOPIC

    def __init__(self, env, broadcast_pipe):
        self.env = env
        self.broadcast_pipe = broadcast_pipe
        self.snapshots = {}  # tick -> last building/status message of that tick
        self.car_trajectories = {}  # car_id -> [(tick, floor)]
        self.requests_accepted = 0
        self.requests_rejected = 0
        self.errors = []

        # JSON Lines event log for offline playback
        self.event_log = []
        self.simulation_metadata = {}

    def _add_event_log(self, event_type, event_data):
        self.event_log.append({
            "time": self.env.now,
            "type": event_type,
            "data": event_data
        })

    def set_simulation_metadata(self, metadata):
        """
        Set simulation metadata (called before simulation starts).

        Args:
            metadata (dict): Simulation configuration
        """
        self.simulation_metadata = {
            "format_version": "1.0",
            "timestamp": datetime.now().isoformat(),
            "config": metadata
        }

    def start_listening(self):
        """
        Main process to start intercepting global broadcasts.
        """
        while True:
            data = yield self.broadcast_pipe.get()
            self.record(data.get('topic', ''), data.get('message', {}))

    def record(self, topic, message):
        """Record one broker message"""
        if topic == self.STATUS_TOPIC:
            self._record_status(message)
        elif topic == self.REQUEST_TOPIC:
            self.requests_accepted += 1
            self._add_event_log('request', message)
        elif topic == self.ERROR_TOPIC:
            self.requests_rejected += 1
            self.errors.append(message)
            self._add_event_log('error', message)

    def _record_status(self, message):
        tick = message.get('tick', 0)
        self.snapshots[tick] = message

        for car in message.get('elevators', []):
            trajectory = self.car_trajectories.setdefault(car['car_id'], [])
            point = (tick, car['current_floor'])
            # Record if not exactly the same as the last data point
            if not trajectory or trajectory[-1] != point:
                trajectory.append(point)

        self._add_event_log('building_status', {
            'tick': tick,
            'system_status': message.get('system_status'),
            'floors': [car['current_floor'] for car in message.get('elevators', [])],
            'up_requests': len(message.get('up_requests', [])),
            'down_requests': len(message.get('down_requests', [])),
        })

    # --- Analysis ---

    def queue_lengths(self):
        """Arrays (ticks, up queue length, down queue length), ordered by tick"""
        ticks = sorted(self.snapshots)
        up = np.array([len(self.snapshots[t].get('up_requests', [])) for t in ticks], dtype=int)
        down = np.array([len(self.snapshots[t].get('down_requests', [])) for t in ticks], dtype=int)
        return np.array(ticks, dtype=int), up, down

    def door_open_share(self):
        """Fraction of recorded ticks each car spent with its door open"""
        ticks = sorted(self.snapshots)
        if not ticks:
            return {}
        door_open = {}
        for tick in ticks:
            for car in self.snapshots[tick].get('elevators', []):
                door_open.setdefault(car['car_id'], []).append(not car['door_closed'])
        return {car_id: float(np.mean(flags)) for car_id, flags in door_open.items()}

    def shutdown_tick(self):
        """First tick at which a stopping system reported out of service, or None"""
        stopping_seen = False
        for tick in sorted(self.snapshots):
            status = self.snapshots[tick].get('system_status')
            if status == 'stopping':
                stopping_seen = True
            elif stopping_seen and status == 'outOfService':
                return tick
        return None

    def summary(self):
        _, up, down = self.queue_lengths()
        return {
            'ticks_recorded': len(self.snapshots),
            'requests_accepted': self.requests_accepted,
            'requests_rejected': self.requests_rejected,
            'mean_up_queue': float(np.mean(up)) if up.size else 0.0,
            'max_up_queue': int(np.max(up)) if up.size else 0,
            'mean_down_queue': float(np.mean(down)) if down.size else 0.0,
            'max_down_queue': int(np.max(down)) if down.size else 0,
            'door_open_share': self.door_open_share(),
            'shutdown_tick': self.shutdown_tick(),
        }

    def print_summary(self):
        stats = self.summary()
        print("\n" + "=" * 60)
        print("   ELEVATOR BANK SUMMARY")
        print("=" * 60)
        print(f"  Ticks recorded:     {stats['ticks_recorded']:>6}")
        print(f"  Requests accepted:  {stats['requests_accepted']:>6}")
        print(f"  Requests rejected:  {stats['requests_rejected']:>6}")
        print(f"  Up queue   (mean/max): {stats['mean_up_queue']:>6.2f} / {stats['max_up_queue']:>3d}")
        print(f"  Down queue (mean/max): {stats['mean_down_queue']:>6.2f} / {stats['max_down_queue']:>3d}")
        for car_id, share in sorted(stats['door_open_share'].items()):
            print(f"  Elevator {car_id} door open: {share:>6.1%}")
        if stats['shutdown_tick'] is not None:
            print(f"  Shutdown completed at tick {stats['shutdown_tick']}")
        print("=" * 60)

    def plot_trajectory_diagram(self, output_filename='elevator_trajectory_diagram.png', show=False):
        """Draw the floor-vs-tick diagram of every car after the run"""
        print("\n--- Plotting: Elevator Trajectory Diagram ---")
        fig = plt.figure(figsize=(14, 8))

        for car_id in sorted(self.car_trajectories):
            trajectory = self.car_trajectories[car_id]
            if not trajectory:
                continue
            ticks, floors = zip(*trajectory)
            plt.step(ticks, floors, where='post', label=f"Elevator {car_id}", linewidth=2.0, alpha=0.8)

        plt.title("Elevator Trajectory Diagram")
        plt.xlabel("Tick")
        plt.ylabel("Floor")
        plt.grid(True, which='both', linestyle='--', alpha=0.7)

        all_floors = [floor for trajectory in self.car_trajectories.values() for _, floor in trajectory]
        if all_floors:
            plt.yticks(range(int(min(all_floors)), int(max(all_floors)) + 1))
        if self.car_trajectories:
            plt.legend(loc='upper right', fontsize=9)

        plt.savefig(output_filename, dpi=150, bbox_inches='tight')
        print(f"Trajectory diagram saved to: {output_filename}")

        if show:
            plt.show()
        plt.close(fig)
        return output_filename

    def save_event_log(self, filename='simulation_log.jsonl'):
        """
        Save the event log to a JSON Lines file.

        Args:
            filename (str): Name of the output file (default: 'simulation_log.jsonl')
        """
        print(f"\nSaving event log to {filename}...")

        with open(filename, 'w', encoding='utf-8') as f:
            # Write metadata as first line
            if self.simulation_metadata:
                f.write(json.dumps({
                    "type": "metadata",
                    "data": self.simulation_metadata
                }) + '\n')

            for event in self.event_log:
                f.write(json.dumps(event, ensure_ascii=False) + '\n')

        print(f"Event log saved: {len(self.event_log)} events written to {filename}")
        return filename
