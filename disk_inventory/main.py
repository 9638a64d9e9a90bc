import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from .core import InventoryApp
from .database.db import DBManager
from .database.ops import RecordStore
from .exceptions import InventoryError, PrivilegeError
from .integrity import verify_store
from .reporting import ReportGenerator, format_summary
from . import config
from . import system


def setup_logging(output_dir: Path, verbose: bool):
    """Sets up logging to both console and a file in the output directory."""
    log_level = logging.DEBUG if verbose else logging.INFO

    output_dir.mkdir(parents=True, exist_ok=True)
    log_file = output_dir / config.LOG_FILE_NAME

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=[
            logging.FileHandler(log_file, encoding='utf-8'),
            logging.StreamHandler(sys.stdout)
        ]
    )


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Disk Inventory: enumerate, hash and sign every file under a root")

    p.add_argument("root", type=Path, nargs="?", default=None,
                   help="Volume or directory to inventory (default: first available volume)")
    p.add_argument("--subpath", type=str, default="",
                   help="Path inside root to restrict the scan to (invalid paths fall back to the whole root)")
    p.add_argument("-w", "--workers", type=int, default=system.max_workers(),
                   help="Number of enrichment workers (default: CPU count)")
    p.add_argument("--batch-size", type=int, default=config.BATCH_MAX_SIZE,
                   help="Rows per insert/update transaction")
    p.add_argument("--output-dir", type=Path, default=Path.cwd(),
                   help="Directory for the SQLite store and log file (default: cwd)")
    p.add_argument("--export-csv", type=Path, default=None,
                   help="Also write the finished inventory to this CSV file")
    p.add_argument("--verify", type=Path, default=None, metavar="DB",
                   help="Verify the signature of an existing store instead of scanning")
    p.add_argument("--skip-privilege-check", action="store_true",
                   help="Do not require administrator/root privileges")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    return p.parse_args(argv)


def resolve_scan_root(root: Optional[Path], subpath: str) -> Path:
    """Picks the scan root; a subpath that does not exist widens to the whole root."""
    if root is None:
        volumes = system.list_volumes()
        if not volumes:
            raise InventoryError("No enumerable volumes found.")
        root = volumes[0]

    if subpath:
        candidate = root / subpath.lstrip("\\/")
        if candidate.exists():
            return candidate
        logging.warning("The path entered is wrong, so the whole disk will be scanned")
    return root


def run_verify(db_path: Path) -> int:
    if not db_path.exists():
        logging.error(f"Database not found at {db_path}.")
        return 1

    with DBManager(db_path, read_only=True) as conn:
        ok = verify_store(conn)

    if ok:
        logging.info(f"Signature OK: {db_path}")
        return 0
    logging.error(f"Signature MISMATCH: {db_path} has been altered.")
    return 1


def run(args) -> int:
    if args.verify:
        return run_verify(args.verify)

    if not args.skip_privilege_check and not system.can_enumerate_volumes():
        raise PrivilegeError("The program must be run with administrator privileges")

    scan_root = resolve_scan_root(args.root, args.subpath)
    logging.info(f"Root:    {scan_root}")
    logging.info(f"Workers: {args.workers}")

    app = InventoryApp(args.output_dir, batch_size=args.batch_size)
    summary = app.run(scan_root, args.workers)

    for line in format_summary(summary):
        logging.info(line)

    if args.export_csv:
        with DBManager(summary.db_path) as conn:
            ReportGenerator(RecordStore(conn)).export_csv(args.export_csv)

    return 0


def main(argv=None) -> int:
    args = parse_args(argv)
    output_dir = args.output_dir.resolve()
    args.output_dir = output_dir

    setup_logging(output_dir, args.verbose)
    logging.info("=== Disk Inventory Started ===")

    try:
        return run(args)
    except KeyboardInterrupt:
        logging.warning("Operation cancelled by user.")
        return 1
    except InventoryError as e:
        logging.error(str(e))
        return 1
    except Exception:
        logging.exception("Fatal error during inventory.")
        return 1


if __name__ == "__main__":
    sys.exit(main())
