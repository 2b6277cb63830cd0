#main.py
import sys

from PySide6.QtGui import QGuiApplication

from queuemirror import config, status, win32
from queuemirror.credentials import CredentialStore
from queuemirror.injector import Injector
from queuemirror.music_windows import get_local_track
from queuemirror.reauth import BackgroundReauth
from queuemirror.renderer import TextRenderer, qt_measure
from queuemirror.spotify_api import PlaybackSource
from queuemirror.storage import BlobStore
from queuemirror.sync_loop import SyncLoop
from queuemirror.target import TargetResolver


def main():
    if not win32.available():
        print("[Sync] Queue Mirror needs Windows to reach the target window.")
        return 1

    # Font metrics and the clipboard both need a Qt application object
    app = QGuiApplication(sys.argv)

    blobs = BlobStore(config.DATA_DIR)
    source = PlaybackSource(local_track=get_local_track)
    credentials = CredentialStore(blobs, source)

    credential = credentials.load_valid()
    if credential is None:
        credential = credentials.prompt_until_valid()
    else:
        status.ok("Auth", "Saved token still works")

    target = TargetResolver(blobs).resolve()

    loop = SyncLoop(
        credential=credential,
        target=target,
        source=source,
        credentials=credentials,
        reauth=BackgroundReauth(),
        renderer=TextRenderer(qt_measure()),
        injector=Injector(),
    )

    try:
        loop.run()
    except KeyboardInterrupt:
        status.info("Sync", "Stopped")
    finally:
        app.quit()
    return 0


if __name__ == "__main__":
    sys.exit(main())
