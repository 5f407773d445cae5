# fastqflow/cli/cli.py
import argparse
import json
import os
import sys

from fastqflow.options.fastp_options import FastpOptions
from fastqflow.pipeline.pipeline_runner import PipelineRunner
from fastqflow.utils.config_loader import ConfigLoader
from fastqflow.utils.errors import PipelineError
from fastqflow.utils.tool_checker import ToolChecker


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fastqflow",
        description="fastqflow: FastQC, MultiQC and fastp over paired-end FASTQ files. "
                    "Run without arguments for the interactive pipeline in the current directory."
    )
    parser.add_argument("--workdir", type=str, default=os.getcwd(),
                        help="Directory holding the FASTQ files (default: current directory)")
    parser.add_argument("--config", type=str,
                        help="YAML file overriding the bundled defaults")
    parser.add_argument("--options", type=str,
                        help="fastp options JSON saved by a previous run (skips the fastp questions)")
    parser.add_argument("--no-plot", action="store_true",
                        help="Do not draw the read statistics graph")
    parser.add_argument("--check-tools", action="store_true",
                        help="Report which required tools are installed and exit")
    parser.add_argument("--verbose", action="store_true", help="Verbose logging")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = ConfigLoader().load(args.config)
        required = settings['tools']['required']

        if args.check_tools:
            checker = ToolChecker()
            checker.print_tool_status(required, verbose=args.verbose)
            _, missing = checker.filter_tool_categories(required)
            return 1 if missing else 0

        options = FastpOptions.load(args.options) if args.options else None

        runner = PipelineRunner(
            root=args.workdir,
            settings=settings,
            options=options,
            plot=not args.no_plot,
            verbose=args.verbose
        )
        result = runner.run()

        if result.plot_status == "failed":
            print(f"[ERROR] Read statistics graph not generated: {result.plot_error}",
                  file=sys.stderr)
            return 1

        if args.verbose:
            print(f"[INFO] Complete results saved to: {runner.layout.result_file}")
        return 0

    except KeyboardInterrupt:
        print("\n[ERROR] Interrupted by user", file=sys.stderr)
        return 130
    except EOFError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 1
    except PipelineError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 1
    except FileNotFoundError as e:
        print(f"[ERROR] File not found: {e}", file=sys.stderr)
        return 1
    except json.JSONDecodeError as e:
        print(f"[ERROR] Invalid JSON file: {e}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"[ERROR] Invalid input: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
