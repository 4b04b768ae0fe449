#!/usr/bin/env python3
"""Star Empires - Headless entry point.

Plays automated games (AI vs AI) on the simulation engine, printing a
summary per turn, and optionally saves the final world snapshot.
"""

import argparse
import logging
import sys

from star_empires.engine.simulation import Simulation
from star_empires.models.difficulty import DIFFICULTY_PROFILES, load_difficulty_profiles
from star_empires.models.faction import Faction
from star_empires.utils.constants import MAP_SIZES, RNG_SEED_DEFAULT
from star_empires.utils.serialization import load_world, save_world


class GameOrchestrator:
    """Runs the turn loop of a game with no human faction."""

    def __init__(self, simulation: Simulation, max_turns: int, quiet: bool = False):
        """Initialize game orchestrator.

        Args:
            simulation: Game to run
            max_turns: Stop after this turn even without a winner
            quiet: If True, only print the final result
        """
        self.simulation = simulation
        self.max_turns = max_turns
        self.quiet = quiet

    def run(self) -> Simulation:
        """Main game loop."""
        world = self.simulation.world
        try:
            while not self.simulation.game_over and world.turn < self.max_turns:
                report = self.simulation.advance_turn()
                if not report.completed:
                    # Only a human faction can leave a turn waiting for a decision
                    print(f"Turn {report.turn} is waiting for a decision ({report.status.value})")
                    break
                if not self.quiet:
                    self._show_turn(len(report.events))
        except KeyboardInterrupt:
            print("\n\nGame interrupted by user. Exiting...")
            sys.exit(0)

        self._show_result()
        return self.simulation

    def _show_turn(self, event_count: int) -> None:
        world = self.simulation.world
        parts = []
        for faction in Faction:
            planets = len(world.planets_owned_by(faction))
            ships = len(world.ships_of(faction))
            parts.append(f"{faction.value}: {planets} planets, {ships} ships")
        print(f"Turn {world.turn:3d} | {' | '.join(parts)} | {event_count} events")

    def _show_result(self) -> None:
        world = self.simulation.world
        print("\n" + "=" * 60)
        if world.winner:
            print(f"{world.winner.value.upper()} wins on turn {world.turn}!")
        else:
            print(f"No winner after {world.turn} turns")
        for faction, score in self.simulation.scores().items():
            print(f"  {faction:>6}: {score} points")
        print("=" * 60)


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Star Empires - Turn-based 4X space conquest simulation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                                  # AI vs AI on a compact map, seed 42
  %(prog)s --map-size vast --difficulty hard
  %(prog)s --profiles profiles.json         # Override difficulty profiles
  %(prog)s --load savegame.json             # Resume a saved game
  %(prog)s --save final.json                # Save the final snapshot
        """,
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=RNG_SEED_DEFAULT,
        help=f"Random seed for map generation (default: {RNG_SEED_DEFAULT})",
    )
    parser.add_argument(
        "--map-size",
        choices=list(MAP_SIZES),
        default="compact",
        help="Map size (default: compact)",
    )
    parser.add_argument(
        "--difficulty",
        default="medium",
        help="Difficulty profile both AIs play with (default: medium)",
    )
    parser.add_argument(
        "--profiles",
        type=str,
        metavar="FILE",
        help="JSON file with difficulty profile overrides",
    )
    parser.add_argument(
        "--max-turns",
        type=int,
        default=200,
        help="Stop after this many turns (default: 200)",
    )
    parser.add_argument("--load", type=str, metavar="FILE", help="Load game from JSON file")
    parser.add_argument(
        "--save",
        type=str,
        metavar="FILE",
        help="Save game to JSON file after completion",
    )
    parser.add_argument("--quiet", action="store_true", help="Only print the final result")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    args = parser.parse_args()

    log_level = logging.DEBUG if args.debug else logging.WARNING
    logging.basicConfig(
        level=log_level,
        format="[%(levelname)s] %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    profiles = DIFFICULTY_PROFILES
    if args.profiles:
        try:
            profiles = load_difficulty_profiles(args.profiles)
        except (OSError, ValueError) as e:
            print(f"Error loading profiles: {e}")
            sys.exit(1)

    try:
        if args.load:
            print(f"Loading game from {args.load}...")
            world = load_world(args.load)
            world.human_faction = None
            simulation = Simulation(world, profiles=profiles)
            print(f"Game loaded successfully (Turn {world.turn}, Seed {world.map_seed})")
        else:
            print(f"Generating {args.map_size} map with seed {args.seed}...")
            simulation = Simulation.new_game(
                seed=args.seed,
                map_size=args.map_size,
                difficulty=args.difficulty,
                human_faction=None,
                profiles=profiles,
            )
    except FileNotFoundError:
        print(f"Error: File {args.load} not found.")
        sys.exit(1)
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)

    GameOrchestrator(simulation, args.max_turns, quiet=args.quiet).run()

    if args.save:
        print(f"\nSaving game to {args.save}...")
        try:
            path = save_world(simulation.world, args.save)
            print(f"Game saved to {path}")
        except OSError as e:
            print(f"Error saving game: {e}")


if __name__ == "__main__":
    main()
