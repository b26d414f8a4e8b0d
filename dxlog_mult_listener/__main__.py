#!/usr/bin/env python3
"""
dxlog-mult-listener main entry point.

Listens for DXLog contact datagrams and sounds an alert for every new
QSO that is a multiplier.
"""

import argparse
import logging
import sys
from typing import Optional, TextIO

from . import __version__
from .alert_player import AlertPlayer, TonePlayer, create_player
from .config import Config, SOUND_MODES, load_config
from .contact_processor import ContactProcessor
from .udp_listener import MultListener

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging to stdout."""
    level = logging.DEBUG if verbose else logging.INFO

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def print_banner(config: Config, player: AlertPlayer, out: Optional[TextIO] = None) -> None:
    """Print the startup banner."""
    out = out or sys.stdout
    print("=== DXLog Multiplier Listener ===", file=out)
    print(f"Port      : UDP {config.listener.port}", file=out)
    print("Trigger   : mult1/mult2/mult3 non-empty AND newqso=true", file=out)
    print(f"Sound     : {player.describe()}", file=out)
    if isinstance(player, TonePlayer):
        print(f"Tone      : {player.tone_summary()}", file=out)
    print(file=out)
    out.flush()


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Sound an alert for new multiplier QSOs broadcast by DXLog",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  dxlog-mult-listener
  dxlog-mult-listener -s beep
  dxlog-mult-listener -c config.toml -v
        """,
    )
    
    parser.add_argument(
        "-c", "--config",
        help="Path to config.toml (built-in defaults if omitted)",
    )
    parser.add_argument(
        "-s", "--sound",
        choices=SOUND_MODES,
        help="Override sound mode from config",
    )
    parser.add_argument(
        "-p", "--port",
        type=int,
        help="Override UDP port from config",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"dxlog-mult-listener {__version__}",
    )
    
    args = parser.parse_args()
    
    # Setup logging
    setup_logging(verbose=args.verbose)
    
    # Load configuration
    try:
        config = load_config(args.config)
    except FileNotFoundError as e:
        logger.error(f"Config file not found: {e}")
        return 1
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1
    
    # Command line overrides
    if args.sound:
        config.sound.mode = args.sound
    if args.port is not None:
        config.listener.port = args.port
        errors = config.validate()
        if errors:
            logger.error(f"Invalid configuration: {'; '.join(errors)}")
            return 1
    
    player = create_player(config.sound)
    processor = ContactProcessor(player)
    listener = MultListener(config.listener, processor)
    
    print_banner(config, player)
    
    try:
        listener.open()
    except OSError as e:
        logger.error(f"Cannot listen on UDP {config.listener.host}:{config.listener.port}: {e}")
        return 1
    
    print(f"Listening on {config.listener.host}:{listener.address[1]} …\n", flush=True)
    
    # Run
    try:
        listener.run_forever()
    except KeyboardInterrupt:
        logger.info("Interrupted")
    finally:
        listener.close()
        logger.info(f"Processor stats: {processor.stats.to_dict()}")
    
    return 0


if __name__ == "__main__":
    sys.exit(main())
