# main.py
"""Auto-scroll follower entry script.

Usage:
    python main.py --document=poem.txt [--transcript=heard.txt] [--serve]
                   [--config=path/to/autoscroll_config.json] [-v]

Shows the reference document and scrolls it to the line being read, using
recognized text replayed from a transcript and/or pushed by remote
recognizers over WebSocket (see client.py).
"""
import sys
import logging
import traceback
from pathlib import Path
from typing import Dict, Optional

from autoscroll.PathResolver import PathResolver
from autoscroll.LoggingSetup import setup_logging


# ============================================================================
# RESOLVE PATHS AT MODULE LOAD TIME
# ============================================================================
if hasattr(sys.modules['__main__'], '__file__'):
    SCRIPT_PATH = Path(sys.modules['__main__'].__file__).resolve()
else:
    SCRIPT_PATH = Path(__file__).resolve()

path_resolver = PathResolver(SCRIPT_PATH)
PATHS = path_resolver.paths


def parse_args(argv: list[str]) -> Dict[str, Optional[str] | bool]:
    """Parse --key=value style arguments.

    Returns:
        Dictionary with document, transcript, config, serve and verbose keys

    Raises:
        ValueError: If --document is missing
    """
    args: Dict[str, Optional[str] | bool] = {
        "document": None,
        "transcript": None,
        "config": str(path_resolver.get_config_path("autoscroll_config.json")),
        "serve": "--serve" in argv,
        "verbose": "-v" in argv,
    }

    for arg in argv:
        if arg.startswith("--document="):
            args["document"] = arg.split("=", 1)[1]
        elif arg.startswith("--transcript="):
            args["transcript"] = arg.split("=", 1)[1]
        elif arg.startswith("--config="):
            args["config"] = arg.split("=", 1)[1]

    if not args["document"]:
        raise ValueError("--document=<path> is required")

    return args


if __name__ == "__main__":
    try:
        args = parse_args(sys.argv[1:])
        is_frozen = getattr(sys, 'frozen', False)

        path_resolver.ensure_local_dir_structure()
        setup_logging(PATHS.logs_dir, verbose=args["verbose"], is_frozen=is_frozen)

        from autoscroll.pipeline import ScrollPipeline

        pipeline = ScrollPipeline(
            document_path=str(path_resolver.resolve_document(args["document"])),
            config_path=args["config"],
            transcript_path=args["transcript"],
            serve=args["serve"],
            verbose=args["verbose"]
        )
        pipeline.run()

    except KeyboardInterrupt:
        logging.info("Interrupted by user.")
        sys.exit(0)
    except Exception as e:
        logging.error(f"ERROR: {type(e).__name__}: {e}")
        logging.error(traceback.format_exc())
        sys.exit(1)
