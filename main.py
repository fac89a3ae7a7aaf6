import argparse
import logging
import sys
import traceback

from astro.orientation import OrientationRange
from pipeline.catalog import load_catalog, load_star_names, synthetic_catalog
from pipeline.engine import SyntheticPipelineEngine
from pipeline.options import PipelineOptions
from session.frame_generator import FrameGenerator
from session.sequence_builder import SequenceBuilder
from settings.storage import SETTINGS_FILE, JsonSettingsStorage

logger = logging.getLogger("livedebug")


def excepthook(exc_type, exc_value, exc_tb):
    from PySide6.QtWidgets import QMessageBox

    msg = "".join(traceback.format_exception(exc_type, exc_value, exc_tb))
    print(msg, file=sys.stderr)

    QMessageBox.critical(
        None,
        "Critical error",
        msg
    )


# ─────────────────────────────────────────────
# CLI
# ─────────────────────────────────────────────

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="livedebug",
        description="Generate and explore synthetic star-tracker frames.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    parser.add_argument("--settings", default=str(SETTINGS_FILE), help="JSON settings file")
    parser.add_argument("--output-dir", help="directory for frame images")
    parser.add_argument("--catalog", help="CSV catalog (ra,dec,magnitude,name)")
    parser.add_argument("--star-names", help="star name table shown next to identified stars")

    sub = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (
        ("sweep", "generate a frame sequence over an orientation range"),
        ("live", "generate a frame sequence and explore it interactively"),
    ):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("--roll-min", type=float, default=0.0)
        p.add_argument("--roll-max", type=float, default=0.0)
        p.add_argument("--ra-min", type=float, default=0.0)
        p.add_argument("--ra-max", type=float, default=0.0)
        p.add_argument("--dec-min", type=float, default=0.0)
        p.add_argument("--dec-max", type=float, default=0.0)
        p.add_argument("--frames", type=int, default=1)

    p = sub.add_parser("pipeline", help="run the pipeline once and compare against the truth")
    p.add_argument("--roll", type=float, default=0.0)
    p.add_argument("--ra", type=float, default=0.0)
    p.add_argument("--dec", type=float, default=0.0)
    p.add_argument("--plot-raw-input", default="")
    p.add_argument("--plot-input", default="")

    return parser


def _setup(args):
    settings = JsonSettingsStorage(args.settings).load()
    if args.output_dir:
        settings.output_dir = args.output_dir
    if args.catalog:
        settings.catalog_path = args.catalog
    if args.star_names:
        settings.star_names_path = args.star_names

    if settings.catalog_path:
        catalog = load_catalog(settings.catalog_path)
    else:
        catalog = synthetic_catalog(settings.catalog_size, seed=settings.seed)
        logger.info("Using a synthetic catalog of %d stars", len(catalog))

    options = PipelineOptions(
        camera=settings.camera.to_camera(),
        noise_sigma=settings.noise_sigma,
        seed=settings.seed,
        id_tolerance_px=settings.id_tolerance_px,
    )
    return settings, SyntheticPipelineEngine(catalog), options


def _orientation_range(args) -> OrientationRange:
    return OrientationRange(
        roll_min=args.roll_min, roll_max=args.roll_max,
        ra_min=args.ra_min, ra_max=args.ra_max,
        dec_min=args.dec_min, dec_max=args.dec_max,
    )


def run_pipeline(args) -> int:
    _, engine, options = _setup(args)
    options.generate_roll = args.roll
    options.generate_ra = args.ra
    options.generate_de = args.dec
    options.plot_raw_input = args.plot_raw_input
    options.plot_input = args.plot_input

    inputs = engine.get_pipeline_input(options)
    outputs = engine.set_pipeline(options).go(inputs)
    engine.compare_outputs(inputs, outputs, options)
    return 0


def run_sweep(args) -> int:
    settings, engine, options = _setup(args)
    builder = SequenceBuilder(FrameGenerator(engine, options, settings.output_dir))

    records = builder.sweep(_orientation_range(args), args.frames)
    for position, record in enumerate(records):
        logger.info("%d: %s", position, record.image_path)
    return 0 if records else 1


def run_live(args) -> int:
    from PySide6.QtWidgets import QApplication

    from session.debug_session import DebugSession
    from solver.frame_loader import load_frame
    from ui.debug_window import DebugWindow

    settings, engine, options = _setup(args)
    builder = SequenceBuilder(FrameGenerator(engine, options, settings.output_dir))

    session = DebugSession.start(
        builder,
        _orientation_range(args),
        args.frames,
        load_frame,
        star_names=load_star_names(settings.star_names_path),
    )
    if not session.timeline:
        logger.error("No frame could be generated, not opening the window")
        return 1

    sys.excepthook = excepthook
    app = QApplication(sys.argv[:1])

    window = DebugWindow(session, settings.window_width, settings.window_height)
    window.show()

    return app.exec()


COMMANDS = {
    "pipeline": run_pipeline,
    "sweep": run_sweep,
    "live": run_live,
}


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    return COMMANDS[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
