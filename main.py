"""
AirDraw - Gesture Drawing on a Live Camera Feed

Pinch to draw, hold an open palm to open the menu, show a victory sign to clear.
"""
import argparse
import sys
import time
from pathlib import Path

# Packages live under src/
sys.path.insert(0, str(Path(__file__).parent / "src"))


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="AirDraw - draw in the air with hand gestures",
        epilog="Gestures: pinch = draw, open palm = menu, victory = clear",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML config file (default: config.yaml next to this script)",
    )
    parser.add_argument(
        "--camera",
        type=int,
        metavar="ID",
        help="Camera device id (overrides config)",
    )
    parser.add_argument(
        "--windowed",
        action="store_true",
        help="Open a 1280x720 window instead of full screen",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="OpenCV view with the hand skeleton and interaction state, no canvas",
    )
    return parser.parse_args(argv)


def apply_overrides(config, args):
    """Fold command line flags into the loaded config."""
    if args.camera is not None:
        config.camera.device_id = args.camera
    if args.windowed:
        config.ui.fullscreen = False
    if args.debug:
        config.ui.debug_overlay = True
    return config


def _draw_debug_info(frame, state, landmarks):
    import cv2
    from airdraw.geometry import detect_open_palm, detect_pointing, detect_victory

    lines = [
        f"{state.mode.name}  menu={'open' if state.menu_open else 'closed'}"
        f"  tool={state.tools.tool.value} {state.tools.color} {state.tools.size}px",
        f"paths={len(state.strokes.paths)}  stroke={len(state.strokes.current)}pts"
        f"  particles={len(state.particles)}",
    ]
    if landmarks is not None:
        lines.append(
            f"pinch={state.pinch_ratio:.3f}  palm={detect_open_palm(landmarks)}"
            f"  victory={detect_victory(landmarks)}  point={detect_pointing(landmarks)}"
        )

    y = 28
    for line in lines:
        cv2.putText(frame, line, (10, y), cv2.FONT_HERSHEY_SIMPLEX, 0.55, (255, 255, 255), 1)
        y += 24

    if state.cursor is not None:
        center = (int(state.cursor.x), int(state.cursor.y))
        cv2.circle(frame, center, 10, (0, 255, 255), 2)
    for path in state.strokes.paths:
        for a, b in zip(path.points, path.points[1:]):
            cv2.line(frame, (int(a.x), int(a.y)), (int(b.x), int(b.y)), (255, 0, 255), 2)


def run_debug_view(config):
    """
    Drive the interaction core straight from the camera in an OpenCV window.
    Detection runs inline; useful for tuning gestures without the Qt canvas.
    """
    import cv2
    from airdraw.scheduler import TickClock
    from airdraw.state_machine import FrameInput, InteractionState, update
    from webcam import HandTracker

    print("Debug view - press 'q' to quit")
    print("-" * 40)

    clock = TickClock(config.camera.fps)
    state = InteractionState()

    try:
        with HandTracker(config) as tracker:
            while True:
                hand = tracker.get_landmarks()
                frame = tracker.get_debug_frame(hand)
                now_ms = time.perf_counter() * 1000.0
                if frame is None or not clock.ready(now_ms):
                    continue

                h, w = frame.shape[:2]
                landmarks = hand.landmarks if hand is not None else None
                before = state.mode
                update(state, FrameInput(landmarks, w, h, now_ms, dt_ms=clock.elapsed_ms))
                if state.mode != before:
                    print(f"[{tracker.frame_count:5d}] {before.name} -> {state.mode.name}")

                _draw_debug_info(frame, state, landmarks)
                cv2.imshow("AirDraw Debug", frame)
                if cv2.waitKey(1) & 0xFF == ord('q'):
                    break
    except RuntimeError as e:
        print(f"ERROR: {e}")
        return 1
    finally:
        cv2.destroyAllWindows()

    return 0


def _connect_worker(window, worker, thread, on_error):
    from PyQt5.QtCore import Qt

    thread.started.connect(worker.start_process)
    worker.finished.connect(thread.quit)

    # Painting must happen on the GUI thread
    worker.state_ready.connect(window.set_render_state, Qt.QueuedConnection)
    worker.frame_ready.connect(window.set_webcam_frame, Qt.QueuedConnection)
    worker.error.connect(on_error, Qt.QueuedConnection)

    # set_layout only swaps a lock-protected snapshot
    window.layout_changed.connect(worker.set_layout, Qt.DirectConnection)


def run_canvas(config):
    """Full AirDraw UI: canvas on the GUI thread, interaction loop on a QThread."""
    import atexit
    import signal
    from PyQt5.QtCore import QThread
    from PyQt5.QtWidgets import QApplication
    from ui import CanvasWindow
    from webcam import WebcamWorker

    app = QApplication(sys.argv)
    window = CanvasWindow(fullscreen=config.ui.fullscreen, debug=config.ui.debug_overlay)

    thread = QThread()
    worker = WebcamWorker(config)
    worker.moveToThread(thread)

    def shutdown():
        """Stop the loop and join the worker thread so the camera is released."""
        print("\nStopping camera...")
        worker.stop_process()
        thread.quit()
        if not thread.wait(2000):
            print("WARNING: worker thread did not stop in time")

    atexit.register(shutdown)

    def on_signal(signum, frame):
        print(f"\nReceived signal {signum}, shutting down...")
        app.quit()

    signal.signal(signal.SIGINT, on_signal)
    signal.signal(signal.SIGTERM, on_signal)

    def on_error(msg):
        print(f"WORKER ERROR: {msg}")
        app.exit(1)

    _connect_worker(window, worker, thread, on_error)

    window.show()
    thread.start()

    try:
        return app.exec_()
    finally:
        shutdown()
        atexit.unregister(shutdown)


def main(argv=None):
    args = parse_args(argv)

    from airdraw import load_config
    config = apply_overrides(load_config(args.config), args)

    cam = config.camera
    print("AirDraw")
    print(f"  Camera:     {cam.device_id} ({cam.width}x{cam.height} @ {cam.fps}fps, mirror={cam.mirror})")
    print(f"  Fullscreen: {config.ui.fullscreen}")
    print(f"  Mode:       {'debug' if args.debug else 'canvas'}")
    print()

    if args.debug:
        return run_debug_view(config)
    return run_canvas(config)


if __name__ == "__main__":
    sys.exit(main())
