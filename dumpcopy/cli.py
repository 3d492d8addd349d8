import argparse
import asyncio
import sys
from typing import Dict, List, Optional, Tuple
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from dumpcopy.config.loader import load_config
from dumpcopy.log import setup_logging
from dumpcopy.models.config import RunOptions
from dumpcopy.services.commands import missing_tools
from dumpcopy.services.pipe import CommandError
from dumpcopy.services.runner import DumpRunner

EMPTY_TABLES_HELP = "Performs full dump ignoring post-cleanup queries and empty-tables configuration"

def build_parser() -> Tuple[argparse.ArgumentParser, Dict[str, argparse.ArgumentParser]]:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("-c", "--config", dest="config_path", default="config.json",
                        help="Path to JSON config file (default: config.json)")
    common.add_argument("-v", "--verbose", action="store_true", help="Enable verbose logging")
    common.add_argument("--log-file", default="dump.log", help="Log file path (default: dump.log)")

    parser = argparse.ArgumentParser(
        prog="dumpcopy",
        description="Copy and back up MySQL databases between named servers using mysqldump and mysql",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Copy a database between servers
  dumpcopy copy prod staging shop

  # Copy under a new name on the target server
  dumpcopy copy prod staging shop shop_test

  # Full dump, ignoring empty tables and post-process queries
  dumpcopy copy prod staging shop -i

  # Dump to a zip archive
  dumpcopy copy prod zip shop -f shop.zip -o backups

  # Copy every configured transaction
  dumpcopy bulk prod staging
        """
    )
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    copy = subparsers.add_parser(
        "copy", parents=[common],
        help="Copy one database to another server or to a zip file",
        usage="%(prog)s SOURCE TARGET DB [DB_RENAME] [FLAGS]\n       %(prog)s SOURCE zip DB [FLAGS]"
    )
    copy.add_argument("source", metavar="SOURCE", help="Name of the source server")
    copy.add_argument("target", metavar="TARGET", help="Name of the target server or zip")
    copy.add_argument("database", metavar="DB", help="Name of the database to dump")
    copy.add_argument("database_rename", metavar="DB_RENAME", nargs="?",
                      help="New name for the database on the target server")
    copy.add_argument("-i", dest="use_empty_tables", action="store_false", help=EMPTY_TABLES_HELP)
    copy.add_argument("-f", "--file", dest="zip_filename", help="Filename for the generated zip")
    copy.add_argument("-o", dest="output_folder", help="Output folder for the zip file")

    bulk = subparsers.add_parser("bulk", parents=[common], help="Copy every configured transaction")
    bulk.add_argument("source", metavar="SOURCE", help="Name of the source server")
    bulk.add_argument("target", metavar="TARGET", help="Name of the target server")
    bulk.add_argument("-i", dest="use_empty_tables", action="store_false", help=EMPTY_TABLES_HELP)

    return parser, {"copy": copy, "bulk": bulk}

def parse_options(argv: Optional[List[str]] = None) -> Optional[RunOptions]:
    """解析命令行参数, 未指定命令时打印帮助并返回 None"""
    parser, commands = build_parser()
    argv = sys.argv[1:] if argv is None else list(argv)

    # 子命令的参数与选项可以任意交错, 例如 copy prod staging shop -i shop_test
    if argv and argv[0] in commands:
        args = commands[argv[0]].parse_intermixed_args(argv[1:])
        args.command = argv[0]
    else:
        args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return None

    return RunOptions(
        command=args.command,
        source=args.source,
        target=args.target,
        database=getattr(args, "database", None),
        database_rename=getattr(args, "database_rename", None),
        use_empty_tables=args.use_empty_tables,
        zip_filename=getattr(args, "zip_filename", None),
        output_folder=getattr(args, "output_folder", None),
        config_path=args.config_path,
        verbose=args.verbose,
        log_file=args.log_file
    )

def required_tools(options: RunOptions) -> List[str]:
    if options.command == "copy" and options.is_zip_target:
        return ["mysqldump"]
    return ["mysqldump", "mysql"]

def run(argv: Optional[List[str]] = None) -> int:
    options = parse_options(argv)
    if options is None:
        return 0

    setup_logging(options.verbose, options.log_file)

    missing = missing_tools(required_tools(options))
    if missing:
        logger.error(f"Missing required tools: {', '.join(missing)}")
        logger.error("Please install MySQL client tools and make sure they are on PATH")
        return 1

    try:
        logger.info(f"Loading configuration from: {options.config_path}")
        config = load_config(options.config_path)

        runner = DumpRunner(config, options)
        return 0 if asyncio.run(runner.run()) else 1

    except KeyboardInterrupt:
        logger.warning("Operation cancelled by user")
        return 130
    except (CommandError, SQLAlchemyError, ValueError, OSError) as e:
        logger.error(str(e))
        return 1

def main() -> None:
    sys.exit(run())
