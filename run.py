#!/usr/bin/env python3
"""
Manga Panel Studio - Main Entry Point

Usage:
    python run.py --serve                                   # Run the gateway proxy
    python run.py --preview page1.png page2.png page3.png   # Play panels once in the console
    python run.py --generate photo.jpg --scene "A hero faces a dragon"
    python run.py --generate photo.jpg --scene "..." --remote   # Go through the proxy
"""
import argparse
import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent))

from config.settings import OPENAI_API_KEY, PLAYBACK_INTERVAL, SERVER_HOST, SERVER_PORT, LOG_LEVEL
from config.logging_setup import setup_logging
from core.errors import MangaPanelError
from core.gateway import MangaPanelGateway
from core.gateway_client import ProxyGatewayClient
from pipeline.manga_session import MangaSession
from upload.images import load_images


def check_environment():
    """Check required environment variables"""
    if not OPENAI_API_KEY:
        print("ERROR: OPENAI_API_KEY not set")
        print("Please create a .env file with your API key")
        print("See env.example for reference")
        return False
    return True


async def preview(paths: list[str], interval: float):
    """Upload panels and play them through once"""
    session = MangaSession()
    session.playback.interval = interval
    try:
        panels = session.upload(load_images(paths))
        print(f"Uploaded {len(panels)} panel(s)")

        session.play()
        last = None
        while session.playback.state.is_playing:
            state = session.playback.state
            if state.current_index != last:
                panel = session.playback.current_panel
                bar = "#" * int(session.playback.progress_fraction * 20)
                print(f"  [{session.playback.position_label}] {panel.resource.name:<30} |{bar:<20}|")
                last = state.current_index
            await asyncio.sleep(min(interval / 10, 0.1))
        print("Preview finished")
    finally:
        session.close()


async def generate(path: str, scene: str, remote: bool):
    """Render one panel as a manga page"""
    gateway = ProxyGatewayClient() if remote else MangaPanelGateway()
    session = MangaSession(gateway=gateway)
    try:
        panel = session.upload(load_images([path]))[0]
        print(f"Generating manga panel for {panel.resource.name}...")
        result = await session.generate(panel.id, scene)
        print(f"\nManga panel: {result.manga_panel_url}")
        print(f"\nDescription:\n{result.description}")
    finally:
        session.close()


def main():
    parser = argparse.ArgumentParser(
        description="Arrange image panels and turn them into manga pages"
    )
    parser.add_argument(
        "--serve",
        action="store_true",
        help="Run the gateway proxy server"
    )
    parser.add_argument("--host", type=str, default=SERVER_HOST, help=f"Server host (default: {SERVER_HOST})")
    parser.add_argument("--port", type=int, default=SERVER_PORT, help=f"Server port (default: {SERVER_PORT})")
    parser.add_argument(
        "--preview", "-p",
        nargs="+",
        metavar="IMAGE",
        help="Play the given images once as a panel preview"
    )
    parser.add_argument(
        "--interval",
        type=float,
        default=PLAYBACK_INTERVAL,
        help=f"Seconds per panel in the preview (default: {PLAYBACK_INTERVAL})"
    )
    parser.add_argument(
        "--generate", "-g",
        type=str,
        metavar="IMAGE",
        help="Image to turn into a manga panel"
    )
    parser.add_argument(
        "--scene", "-s",
        type=str,
        default="",
        help="Scene description for --generate"
    )
    parser.add_argument(
        "--remote",
        action="store_true",
        help="Send --generate through the gateway proxy instead of calling OpenAI directly"
    )

    args = parser.parse_args()
    setup_logging(LOG_LEVEL)

    try:
        if args.serve:
            if not check_environment():
                sys.exit(1)
            from api.main import run
            run(host=args.host, port=args.port)
        elif args.preview:
            asyncio.run(preview(args.preview, args.interval))
        elif args.generate:
            if not args.scene.strip():
                print("ERROR: --scene is required with --generate")
                sys.exit(1)
            if not args.remote and not check_environment():
                sys.exit(1)
            asyncio.run(generate(args.generate, args.scene, args.remote))
        else:
            parser.print_help()
            print("\nExamples:")
            print("  python run.py --serve")
            print("  python run.py --preview page1.png page2.png")
            print('  python run.py --generate photo.jpg --scene "A duel at dawn"')
    except MangaPanelError as e:
        print(f"\nERROR: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
