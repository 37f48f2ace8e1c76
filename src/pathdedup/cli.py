#!/usr/bin/env python3
"""
pathdedup CLI — Command line interface for the record-oriented duplicate detection pipeline.
Every sub-command is one stage: its input and output are plain text files, so stages can be
chained by hand, from scripts, or all at once with the `run` sub-command.
Discarded duplicates are only ever moved to the system trash, never erased.
"""
from __future__ import annotations  # Enable postponed evaluation of annotations (PEP 563)
import argparse
import sys
import os
import time
import logging
from typing import List, Optional, NoReturn

logging.basicConfig(
    level=logging.ERROR,
    format="%(levelname)-8s | %(name)-25s | %(message)s"
)

from pathdedup.core.errors import DedupError
from pathdedup.core.models import FilterParams, PipelineConfig, RunSummary, DEFAULT_LARGE_FILE_THRESHOLD
from pathdedup.core.stages import (
    GatherStage, HashStage, SingleHashStage, FilterStage, DetectStage, UniqueStage, CopyStage
)
from pathdedup.commands import PipelineCommand
from pathdedup.services.reporter import Reporter
from pathdedup.utils.convert_utils import ConvertUtils
from pathdedup.aliases import (
    ALGORITHM_ALIASES, ALGORITHM_CHOICES, ALGORITHM_HELP_TEXT,
    KEY_POLICY_ALIASES, KEY_POLICY_CHOICES, KEY_POLICY_HELP_TEXT,
    BYTES_HELP_TEXT, CASE_INSENSITIVE_HELP, EPILOG_TEXT
)

PATTERN_OPTIONS = (
    ("blacklist_path_starts", "--blacklist-starts", "Reject paths starting with any of these"),
    ("blacklist_path_ends", "--blacklist-ends", "Reject paths ending with any of these"),
    ("blacklist_path_contents", "--blacklist-contains", "Reject paths containing any of these"),
    ("whitelist_path_starts", "--whitelist-starts", "Only admit paths starting with one of these"),
    ("whitelist_path_ends", "--whitelist-ends", "Only admit paths ending with one of these"),
    ("whitelist_path_contents", "--whitelist-contains", "Only admit paths containing one of these"),
)


class CLIApplication:
    """Main CLI application controller."""

    def __init__(self):
        self.start_time: float = time.time()
        self.verbose: bool = False
        self.quiet: bool = False

        # Fix encoding for Windows consoles to prevent UnicodeEncodeError
        for stream in (sys.stdout, sys.stderr):
            if hasattr(stream, "reconfigure"):
                stream.reconfigure(encoding='utf-8')

    # =============================
    # Argument parsing
    # =============================
    @staticmethod
    def _common_parser() -> argparse.ArgumentParser:
        common = argparse.ArgumentParser(add_help=False)
        common.add_argument(
            "--debug", "-d",
            action="store_true",
            help="Log every step and echo every reported error to the console"
        )
        common.add_argument(
            "--error-log", "-e",
            default=None,
            type=str,
            metavar='',
            dest="error_log",
            help="File collecting per-file errors (created only when an error occurs)"
        )
        common.add_argument(
            "--quiet", "-q",
            action="store_true",
            help="Suppress non-essential output"
        )
        common.add_argument(
            "--verbose", "-v",
            action="store_true",
            help="Show progress while working"
        )
        return common

    @staticmethod
    def _add_hash_options(parser: argparse.ArgumentParser) -> None:
        parser.add_argument(
            "--algorithm", "-a",
            choices=ALGORITHM_CHOICES,
            default="sha1",
            type=str,
            help=ALGORITHM_HELP_TEXT
        )
        parser.add_argument(
            "--bytes", "-b",
            default="0",
            type=str,
            metavar='',
            help=BYTES_HELP_TEXT
        )
        parser.add_argument(
            "--large-file-threshold",
            default=str(DEFAULT_LARGE_FILE_THRESHOLD),
            type=str,
            metavar='',
            dest="large_file_threshold",
            help=f"Size above which --bytes 0 hashes nothing. Default: {DEFAULT_LARGE_FILE_THRESHOLD}"
        )

    @staticmethod
    def _add_filter_options(parser: argparse.ArgumentParser) -> None:
        parser.add_argument(
            "--min-size", "-m",
            default="0",
            type=str,
            metavar='',
            help="Minimum file size, inclusive (e.g., 500KB, 1MB). Default: 0"
        )
        parser.add_argument(
            "--max-size", "-M",
            default=None,
            type=str,
            metavar='',
            help="Maximum file size, inclusive (e.g., 10MB, 1GB). Default: unbounded"
        )
        parser.add_argument(
            "--exclude-unique-sizes",
            action="store_true",
            help="Drop records whose size no other admitted record has"
        )
        parser.add_argument(
            "--exclude-unique-hashes",
            action="store_true",
            help="Drop records whose hash no other admitted record has"
        )
        parser.add_argument(
            "--hash-key",
            choices=["hash", "size-hash"],
            default="size-hash",
            type=str,
            dest="hash_key",
            help="Key used by --exclude-unique-hashes. Default: size-hash"
        )
        for dest, flag, text in PATTERN_OPTIONS:
            parser.add_argument(
                flag,
                nargs="+",
                default=[],
                type=str,
                metavar='',
                dest=dest,
                help=f"{text}.\n{CASE_INSENSITIVE_HELP}"
            )

    def parse_args(self, args=None) -> argparse.Namespace:
        """Parse and validate command-line arguments."""
        parser = argparse.ArgumentParser(
            prog="pathdedup",
            description="pathdedup — record-oriented duplicate file detection",
            formatter_class=argparse.RawTextHelpFormatter,
            epilog=EPILOG_TEXT
        )
        subparsers = parser.add_subparsers(dest="command", required=True)
        common = self._common_parser()

        def add(name: str, help_text: str) -> argparse.ArgumentParser:
            return subparsers.add_parser(
                name, help=help_text, parents=[common], formatter_class=argparse.RawTextHelpFormatter
            )

        # gather-paths
        gather = add("gather-paths", "Walk a directory and write its records file")
        gather.add_argument("--input", "-i", required=True, type=str, help="Directory to walk")
        gather.add_argument("--output", "-o", required=True, type=str, help="Records file to write")
        gather.add_argument("--no-recursive", action="store_false", dest="recursive",
                            help="Only list files directly inside the input directory")
        gather.add_argument("--hash", action="store_true", dest="hashing",
                            help="Hash every file while walking")
        self._add_hash_options(gather)

        # hash-paths
        hash_paths = add("hash-paths", "Fill in the hash column of a records file")
        hash_paths.add_argument("--input", "-i", required=True, type=str, help="Records file to read")
        hash_paths.add_argument("--output", "-o", required=True, type=str, help="Records file to write")
        self._add_hash_options(hash_paths)

        # single-hash
        single = add("single-hash", "Print the digest of one file")
        single.add_argument("--input", "-i", required=True, type=str, help="File to hash")
        self._add_hash_options(single)

        # filter-paths
        filter_paths = add("filter-paths", "Keep only the records admitted by the filters")
        filter_paths.add_argument("--input", "-i", required=True, type=str, help="Records file to read")
        filter_paths.add_argument("--output", "-o", required=True, type=str, help="Records file to write")
        self._add_filter_options(filter_paths)

        # detect-dups
        detect = add("detect-dups", "Group records sharing a key and export the groups")
        detect.add_argument("--input", "-i", required=True, type=str, help="Hashed records file to read")
        detect.add_argument("--output", "-o", required=True, type=str, help="Group export to write")
        detect.add_argument("--key", "-k", choices=KEY_POLICY_CHOICES, default="size-hash", type=str,
                            help=KEY_POLICY_HELP_TEXT + "Default: size-hash\n")

        # unique-paths
        unique = add("unique-paths", "Drop every non-representative member of each group")
        unique.add_argument("--input-paths", required=True, type=str, dest="input_paths",
                            help="Records file to read")
        unique.add_argument("--input-dups", required=True, type=str, dest="input_dups",
                            help="Group export to read")
        unique.add_argument("--output", "-o", required=True, type=str, help="File to write")
        unique.add_argument("--only-paths", action="store_true", dest="only_paths",
                            help="Write bare paths without header, size or hash")
        unique.add_argument("--trash", action="store_true",
                            help="Move discarded duplicates to trash. Always shows preview first.")
        unique.add_argument("--force", action="store_true",
                            help="Skip confirmation prompt when used with --trash (for automation/scripts)")

        # copy-files
        copy = add("copy-files", "Copy every listed file into a new folder")
        copy.add_argument("--input", "-i", required=True, type=str, help="Records or path-only file")
        copy.add_argument("--output", "-o", required=True, type=str, help="Target folder (must not exist)")
        copy.add_argument("--flatten", action="store_true",
                          help="Put every file directly into the target folder, renaming clashes")

        # run
        run = add("run", "Walk, hash, filter, group and join in one go")
        run.add_argument("--input", "-i", required=True, type=str, help="Directory to walk")
        run.add_argument("--groups", "-g", required=True, type=str, help="Group export to write")
        run.add_argument("--output", "-o", required=True, type=str, help="Deduplicated records file")
        run.add_argument("--no-recursive", action="store_false", dest="recursive",
                         help="Only list files directly inside the input directory")
        run.add_argument("--key", "-k", choices=KEY_POLICY_CHOICES, default="size-hash", type=str,
                         help=KEY_POLICY_HELP_TEXT + "Default: size-hash\n")
        run.add_argument("--only-paths", action="store_true", dest="only_paths",
                         help="Write bare paths without header, size or hash")
        self._add_hash_options(run)
        self._add_filter_options(run)

        return parser.parse_args(args)

    def validate_args(self, args: argparse.Namespace) -> None:
        """Validate command-line arguments before execution."""
        if args.command != "unique-paths":
            return

        if args.force and not args.trash:
            self.error_exit("--force can only be used with --trash")

        # Prevent interactive confirmation in non-TTY environments
        if args.trash and not args.force:
            if not sys.stdin.isatty() or not sys.stdout.isatty():
                self.error_exit(
                    "Cannot request interactive confirmation in non-interactive session.\n"
                    "Use --force flag to proceed without confirmation when piping output or running in scripts."
                )

    def create_config(self, args: argparse.Namespace) -> PipelineConfig:
        """Create PipelineConfig from CLI arguments."""
        try:
            options = {
                "debug": args.debug,
                "error_log": args.error_log,
            }
            if hasattr(args, "recursive"):
                options["recursive"] = args.recursive
            if hasattr(args, "hashing"):
                options["hashing"] = args.hashing
            if hasattr(args, "algorithm"):
                options["algorithm"] = ALGORITHM_ALIASES[args.algorithm]
                options["bytes"] = ConvertUtils.human_to_bytes(args.bytes)
                options["large_file_threshold"] = ConvertUtils.human_to_bytes(args.large_file_threshold)
            if hasattr(args, "key"):
                options["key_policy"] = KEY_POLICY_ALIASES[args.key]
            if hasattr(args, "only_paths"):
                options["only_paths"] = args.only_paths
            if hasattr(args, "flatten"):
                options["flatten"] = args.flatten
            if hasattr(args, "min_size"):
                options["filters"] = FilterParams.from_human_readable(
                    args.min_size,
                    args.max_size,
                    exclude_unique_sizes=args.exclude_unique_sizes,
                    exclude_unique_hashes=args.exclude_unique_hashes,
                    hash_key_policy=KEY_POLICY_ALIASES[args.hash_key],
                    **{dest: getattr(args, dest) for dest, _, _ in PATTERN_OPTIONS}
                )
            return PipelineConfig(**options)
        except ValueError as e:
            self.error_exit(f"Parameter error: {e}")

    # =============================
    # Output helpers
    # =============================
    def progress_callback(self, stage: str, current: int, total: Optional[int]) -> None:
        """CLI progress callback - shows progress in console."""
        if not self.verbose:
            return

        if total and total > 0:
            percent = (current / total) * 100
            sys.stderr.write(
                f"\r  [{stage}] {current}/{total} ({percent:.1f}%)"
            )
            sys.stderr.flush()
        else:
            sys.stderr.write(f"\r  [{stage}] {current} processed...")
            sys.stderr.flush()

    def output_summary(self, summary: RunSummary) -> None:
        if self.verbose:
            sys.stderr.write("\n")
        if self.quiet:
            return
        print(summary.print_summary())

    def warning(self, message: str) -> None:
        """Print a warning message to stderr."""
        if not self.quiet:
            print(f"⚠️  {message}", file=sys.stderr)

    @staticmethod
    def error_exit(message: str, code: int = 1) -> NoReturn:
        """Print error and exit."""
        print(f"❌ Error: {message}", file=sys.stderr)
        sys.exit(code)

    # =============================
    # Sub-commands
    # =============================
    def cmd_gather_paths(self, args, config, reporter) -> RunSummary:
        return GatherStage(config, reporter).process(args.input, args.output)

    def cmd_hash_paths(self, args, config, reporter) -> RunSummary:
        return HashStage(config, reporter).process(
            args.input, args.output,
            progress_callback=self.progress_callback if self.verbose else None
        )

    def cmd_single_hash(self, args, config, reporter) -> RunSummary:
        stage = SingleHashStage(config, reporter)
        summary = stage.process(args.input)
        if self.quiet:
            # Scripts still need the digest itself
            print(stage.digest)
        return summary

    def cmd_filter_paths(self, args, config, reporter) -> RunSummary:
        return FilterStage(config, reporter).process(args.input, args.output)

    def cmd_detect_dups(self, args, config, reporter) -> RunSummary:
        return DetectStage(config, reporter).process(args.input, args.output)

    def cmd_unique_paths(self, args, config, reporter) -> RunSummary:
        stage = UniqueStage(config, reporter)
        summary = stage.process(args.input_paths, args.input_dups, args.output)
        if args.trash:
            self.output_summary(summary)
            summary = self.execute_trash(stage, force=args.force)
        return summary

    def cmd_copy_files(self, args, config, reporter) -> RunSummary:
        if os.path.exists(args.output):
            self.error_exit(f"Target folder already exists: {args.output}")
        return CopyStage(config, reporter).process(
            args.input, args.output,
            progress_callback=self.progress_callback if self.verbose else None
        )

    def cmd_run(self, args, config, reporter) -> RunSummary:
        if not self.quiet:
            print(f"Scanning directory: {args.input}")
        _, summary = PipelineCommand(config, reporter).execute(
            args.input, args.groups, args.output,
            progress_callback=self.progress_callback if self.verbose else None
        )
        return summary

    def execute_trash(self, stage: UniqueStage, force: bool = False) -> Optional[RunSummary]:
        """Move the discarded duplicates to trash. Always shows preview before deletion."""
        files_to_delete: List[str] = stage.verify_discarded()
        kept = len(stage.discarded) - len(files_to_delete)
        if kept:
            self.warning(f"{kept} discarded paths are not identical to their group's first path "
                         f"or could not be read; they stay in place")
        if not files_to_delete:
            if not self.quiet:
                print("No files to move to trash.")
            return None

        # Always show deletion preview before action (safety first)
        print()
        for path in files_to_delete:
            print(f"   [DEL]  {path}")
        print("=" * 60)
        print(f"Summary: {len(files_to_delete)} duplicates will be moved to trash")
        print()

        if force:
            print("⚠️  WARNING: --force flag skips confirmation. Proceeding with deletion...")
        else:
            # Safety check: confirm we're still in interactive mode
            if not sys.stdin.isatty() or not sys.stdout.isatty():
                self.error_exit(
                    "Lost interactive terminal during operation. "
                    "Use --force to proceed in non-interactive environments."
                )

            response = input(f"Are you sure you want to move {len(files_to_delete)} files to trash? [y/N]: ")
            if response.strip().lower() not in ("y", "yes"):
                print("Deletion cancelled by user.")
                return None

        print(f"\nMoving {len(files_to_delete)} files to trash...")
        return stage.trash_discarded(files_to_delete)

    def run(self, args=None) -> None:
        """Main entry point with conditional output behavior."""
        args = self.parse_args(args)
        self.verbose = args.verbose
        self.quiet = args.quiet

        if args.debug:
            logging.getLogger().setLevel(logging.DEBUG)

        self.validate_args(args)
        config = self.create_config(args)

        commands = {
            "gather-paths": self.cmd_gather_paths,
            "hash-paths": self.cmd_hash_paths,
            "single-hash": self.cmd_single_hash,
            "filter-paths": self.cmd_filter_paths,
            "detect-dups": self.cmd_detect_dups,
            "unique-paths": self.cmd_unique_paths,
            "copy-files": self.cmd_copy_files,
            "run": self.cmd_run,
        }

        with Reporter(config.error_log, debug=config.debug) as reporter:
            summary = commands[args.command](args, config, reporter)

        if summary is not None:
            self.output_summary(summary)
        if reporter.error_count():
            self.warning(f"{reporter.error_count()} file(s) could not be processed")

        elapsed = time.time() - self.start_time
        if self.verbose:
            print(f"\n✅ Completed in {elapsed:.2f} seconds")


def main(argv=None) -> None:
    """Application entry point."""
    app = CLIApplication()
    try:
        app.run(argv)
    except KeyboardInterrupt:
        print("\n⚠️  Operation cancelled by user (Ctrl+C)")
        sys.exit(130)
    except (DedupError, OSError, RuntimeError, ValueError) as e:
        if os.environ.get("DEBUG"):
            raise
        print(f"❌ Error: {e}", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        if os.environ.get("DEBUG"):
            raise
        print(f"❌ Unexpected error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
