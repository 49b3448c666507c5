"""
Main entry point for the spend simulator.
"""
import sys
import argparse

from spendsim.config.settings import settings
from spendsim.utils.exceptions import ChannelNotFoundError, SimulatorException
from spendsim.utils.logging import setup_logging


def parse_spend(value: str):
    """Parse a ``channel=amount`` pair."""
    channel_id, sep, amount = value.partition("=")
    if not sep or not channel_id:
        raise argparse.ArgumentTypeError(f"Expected channel=amount, got {value!r}")
    try:
        spend = float(amount)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Spend for {channel_id} is not a number: {amount!r}")
    if spend < 0:
        raise argparse.ArgumentTypeError(f"Spend for {channel_id} must be non-negative")
    return channel_id, spend


def create_parser():
    """Create command-line argument parser."""
    parser = argparse.ArgumentParser(description="Marketing Spend Simulator")
    parser.add_argument(
        "--channels-file",
        default=settings.simulation.channels_file,
        help="JSON file with channel parameters (reference channels if omitted)"
    )
    parser.add_argument(
        "--log-level",
        default=settings.logging.level.upper(),
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Set logging level"
    )
    # Running without a subcommand starts the server with its defaults
    parser.set_defaults(
        host=settings.api.host,
        port=settings.api.port,
        reload=settings.api.reload
    )
    subparsers = parser.add_subparsers(dest="command")

    serve = subparsers.add_parser("serve", help="Run the API server")
    serve.add_argument("--host", default=settings.api.host, help="Host to bind the server to")
    serve.add_argument("--port", type=int, default=settings.api.port, help="Port to bind the server to")
    serve.add_argument(
        "--reload",
        action="store_true",
        default=settings.api.reload,
        help="Enable auto-reload on code changes"
    )

    sim = subparsers.add_parser("simulate", help="Evaluate a spend allocation")
    sim.add_argument(
        "--spend",
        type=parse_spend,
        action="append",
        default=[],
        metavar="CHANNEL=AMOUNT",
        help="Spend for a channel; repeat per channel (reference allocation if omitted)"
    )

    curve = subparsers.add_parser("curve", help="Sample a channel's response curve")
    curve.add_argument("--channel", required=True, help="Channel id")
    curve.add_argument("--max-spend", type=float, default=settings.simulation.max_channel_spend)
    curve.add_argument("--steps", type=int, default=settings.simulation.curve_steps)
    curve.add_argument("--overshoot", type=int, default=settings.simulation.curve_overshoot)

    return parser


def run_simulate(args) -> int:
    from spendsim.config.channels import REFERENCE_ALLOCATION, get_configured_channels
    from spendsim.model.simulation import efficiency_rating, simulate

    channels = get_configured_channels(args.channels_file)
    allocation = dict(args.spend) if args.spend else dict(REFERENCE_ALLOCATION)

    result = simulate(allocation, channels, settings.simulation.marginal_increment)
    rating = efficiency_rating(result.total_return_ratio)

    print(result.to_frame().to_string(index=False, float_format=lambda v: f"{v:,.2f}"))
    print()
    print(f"Total spend:   {result.total_spend:,.2f}")
    print(f"Total revenue: {result.total_revenue:,.2f}")
    print(f"Total ROAS:    {result.total_return_ratio:.2f}x ({rating['label']})")
    return 0


def run_curve(args) -> int:
    from spendsim.config.channels import find_channel, get_configured_channels
    from spendsim.model.simulation import curve_frame, sample_curve

    channels = get_configured_channels(args.channels_file)
    try:
        channel = find_channel(channels, args.channel)
    except ChannelNotFoundError:
        print(f"Unknown channel: {args.channel}", file=sys.stderr)
        return 2

    try:
        points = sample_curve(channel, args.max_spend, args.steps, args.overshoot)
    except ValueError as e:
        print(f"Invalid curve parameters: {e}", file=sys.stderr)
        return 2

    print(curve_frame(points).to_string(index=False, float_format=lambda v: f"{v:,.2f}"))
    return 0


def run_server(args) -> int:
    import uvicorn

    settings.setup_directories()

    print(f"Starting spend simulator API on {args.host}:{args.port}")
    print(f"Environment: {settings.env.value}")
    print(f"Log level: {args.log_level}")

    try:
        uvicorn.run(
            "spendsim.api.main:app",
            host=args.host,
            port=args.port,
            reload=args.reload,
            log_level=args.log_level.lower()
        )
    except KeyboardInterrupt:
        print("\nShutting down spend simulator API...")
    return 0


def main(argv=None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.channels_file:
        settings.simulation.channels_file = args.channels_file

    setup_logging(args.log_level)

    command = args.command or "serve"

    try:
        if command == "simulate":
            return run_simulate(args)
        if command == "curve":
            return run_curve(args)
        return run_server(args)
    except SimulatorException as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
