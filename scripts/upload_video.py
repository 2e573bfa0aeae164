#!/usr/bin/env python3
"""
Upload Video - Terminal Front-End

Picks a local video, gets an upload session from the broker and streams the
file to Vimeo over tus, with a progress bar. Ctrl+C cancels the upload.

Usage:
    python scripts/upload_video.py match.mp4                   # via broker at BROKER_BASE_URL
    python scripts/upload_video.py match.mp4 --broker-url http://host:8000
    python scripts/upload_video.py match.mp4 --direct          # in-process broker (needs VIMEO_ACCESS_TOKEN)
    python scripts/upload_video.py match.mp4 --mock            # simulated transfer, no upload

Exit codes:
    0 = uploaded, 1 = failed, 130 = cancelled
"""

import argparse
import logging
import sys
from functools import partial
from pathlib import Path
from typing import Optional

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from broker import BrokerConfig, SessionBroker
from config.settings import BROKER_BASE_URL
from core.logging_config import setup_logging
from core.state_machine import TransferState, TransferStatus
from upload import BrokerClient, SelectedFile, TransferFactory, UploadOrchestrator, render_view
from upload.view import BannerKind, UploaderView

logger = logging.getLogger(__name__)

PROGRESS_BAR_WIDTH = 40

BANNER_ICONS = {
    BannerKind.ERROR: "❌",
    BannerKind.INFO: "ℹ️ ",
    BannerKind.SUCCESS: "✅",
}


def pick_file(path: str) -> Optional[SelectedFile]:
    """
    File picker: accepts existing video files only.

    Returns:
        SelectedFile, or None if the file cannot be used
    """
    try:
        selected = SelectedFile.from_path(path)
    except OSError as e:
        print(f"❌ Cannot open {path}: {e}")
        return None

    if not selected.is_video:
        print(f"❌ Not a video file: {selected.name} ({selected.mime_type})")
        return None

    return selected


class TerminalRenderer:
    """Draws UploaderView updates on stdout"""

    def __init__(self, orchestrator: Optional[UploadOrchestrator] = None):
        self.orchestrator = orchestrator
        self._progress_drawn = False
        self._last_banner = None

    def on_state_change(self, state: TransferState) -> None:
        selected = self.orchestrator.selected_file if self.orchestrator else None
        self.render(render_view(state, selected))

    def render(self, view: UploaderView) -> None:
        if view.progress_visible:
            filled = int(PROGRESS_BAR_WIDTH * view.progress / 100)
            bar = "#" * filled + "." * (PROGRESS_BAR_WIDTH - filled)
            sys.stdout.write(f"\r[{bar}] {view.progress_text}  (Ctrl+C to cancel)")
            sys.stdout.flush()
            self._progress_drawn = True

        if view.banner and view.banner != self._last_banner:
            if self._progress_drawn:
                sys.stdout.write("\n")
                self._progress_drawn = False

            print(f"{BANNER_ICONS[view.banner.kind]} {view.banner.text}")
            if view.banner.link:
                print(f"   Watch on Vimeo: {view.banner.link}")

        self._last_banner = view.banner


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Upload a video to Vimeo with a resumable (tus) transfer",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument("file", help="Video file to upload")

    parser.add_argument(
        "--broker-url",
        default=BROKER_BASE_URL,
        help=f"Session broker URL (default: {BROKER_BASE_URL})",
    )

    parser.add_argument(
        "--direct",
        action="store_true",
        help="Create the session in-process instead of calling the broker",
    )

    parser.add_argument(
        "--mock",
        action="store_true",
        help="Simulate the transfer instead of uploading",
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Print debug logs to the console",
    )

    args = parser.parse_args()

    setup_logging(
        level="DEBUG" if args.verbose else None,
        log_file="uploader.log",
        console=args.verbose,
    )

    selected = pick_file(args.file)
    if selected is None:
        return 1

    if args.direct:
        session_provider = SessionBroker(BrokerConfig.from_env())
    else:
        session_provider = BrokerClient(args.broker_url)

    transfer_factory = None
    if args.mock:
        transfer_factory = partial(
            TransferFactory.create_transfer,
            mode="mock",
            simulate_timing=True,
        )

    renderer = TerminalRenderer()
    orchestrator = UploadOrchestrator(
        session_provider=session_provider,
        transfer_factory=transfer_factory,
        on_state_change=renderer.on_state_change,
    )
    renderer.orchestrator = orchestrator

    orchestrator.select_file(selected)
    print(f"File: {selected.name}")
    print(f"Size: {selected.size_mb:.2f} MB")

    try:
        orchestrator.start_upload()
        while orchestrator.state.is_uploading:
            orchestrator.wait_for_completion(timeout=0.5)
    except KeyboardInterrupt:
        orchestrator.cancel_upload()

    final_state = orchestrator.state
    logger.info(f"Upload finished: {orchestrator.get_status()}")

    if final_state.status == TransferStatus.SUCCESS:
        return 0
    if final_state.status == TransferStatus.CANCELLED:
        return 130
    return 1


if __name__ == "__main__":
    sys.exit(main())
