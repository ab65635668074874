"""
Zhouyou CLI - Command-line interface for the engine.

Usage:
    zhouyou simulate [--players N] [--win W] [--mode quick]   Play a computer-only game
    zhouyou serve [--host H] [--port P]                       Run the HTTP API
"""

import argparse
import sys


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Zhouyou - Confucius travels among the states",
        prog="zhouyou",
    )
    parser.add_argument("--log-level", default=None, help="Logging level (default from ZHOUYOU_LOG_LEVEL)")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Simulate command
    simulate_parser = subparsers.add_parser("simulate", help="Play a computer-only game on a virtual clock")
    simulate_parser.add_argument("--players", type=int, default=4, help="Number of travellers (2-6)")
    simulate_parser.add_argument("--win", type=int, default=10, help="Portions of meat needed to win")
    simulate_parser.add_argument("--mode", choices=["normal", "quick", "advanced"], default="quick")
    simulate_parser.add_argument("--seed", type=int, default=None, help="Random seed")
    simulate_parser.add_argument("--max-turns", type=int, default=500, help="Stop after this many turns")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    args = parser.parse_args()

    if args.command == "simulate":
        cmd_simulate(args)
    elif args.command == "serve":
        cmd_serve(args)
    else:
        parser.print_help()
        sys.exit(1)


def cmd_simulate(args):
    """Play a computer-only game, confirming decisions and pauses automatically."""
    from .config import GameMode, Settings, configure_logging
    from .engine_core.action import Action
    from .engine_core.state import PlayerState, TurnStage
    from .games.confucius import CHARACTERS
    from .session import create_game

    settings = Settings.from_env()
    configure_logging(args.log_level or settings.log_level)

    if not 2 <= args.players <= len(CHARACTERS):
        print(f"Error: --players must be between 2 and {len(CHARACTERS)}")
        sys.exit(1)

    generator = None
    if args.mode == "advanced" and settings.anthropic_api_key:
        from .generation import AnthropicClient, TrialGenerator
        generator = TrialGenerator(
            AnthropicClient(model=settings.llm_model, api_key=settings.anthropic_api_key)
        )

    controller, _ = create_game(generator=generator, seed=args.seed)
    players = [
        PlayerState(player_id=f"p{i + 1}", character=CHARACTERS[i], is_ai=True)
        for i in range(args.players)
    ]
    result = controller.dispatch(Action.start_game(players, args.win, GameMode(args.mode)))
    if not result.success:
        print(f"Error: {result.error}")
        sys.exit(1)

    store, scheduler = controller.store, controller.scheduler
    while not store.state.is_over and store.state.turn_number <= args.max_turns:
        if scheduler.run_next():
            continue
        state = store.state
        if state.waiting_for_confirmation:
            controller.dispatch(Action.confirm_ai_decision())
        elif state.stage == TurnStage.PAUSED:
            controller.dispatch(Action.acknowledge_pause())
        else:
            print(f"Error: game stalled at stage {state.stage.value}")
            sys.exit(1)

    state = store.state
    print(f"\nFinished after {state.turn_number} turns ({scheduler.now_ms / 1000:.1f}s of game time)")
    for p in sorted(state.players, key=lambda p: -p.meat):
        marker = " <- winner" if p.player_id == state.winner_id else ""
        print(f"  {p.character:<10} meat={p.meat:<3} tile={p.position}{marker}")
    if state.winner_id is None:
        print("No winner within the turn limit.")


def cmd_serve(args):
    """Run the API with uvicorn."""
    import uvicorn
    from .api import create_app

    uvicorn.run(create_app(), host=args.host, port=args.port)


if __name__ == "__main__":
    main()
