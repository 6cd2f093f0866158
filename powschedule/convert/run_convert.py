"""
Convert a dPOW file into a schedule file, and open the result in its default application.
PROMPT> python -m powschedule.convert.run_convert /path/to/004-Newtown_Country_Park.dpow

Write a CSV file instead of MS Project XML, and don't open it afterwards.
PROMPT> python -m powschedule.convert.run_convert /path/to/004-Newtown_Country_Park.dpow gantt.csv --no-open
"""
import argparse
import logging
import sys
import webbrowser
from pathlib import Path
from typing import Optional, Sequence
from powschedule.dpow.plan_of_work import PlanOfWork, PlanOfWorkParseError
from powschedule.convert.convertor import convert
from powschedule.export.project_writer import ProjectWriteError, ProjectWriterUtility, UnsupportedFormatError
from powschedule.utils.powschedule_config import PowScheduleConfig

logger = logging.getLogger(__name__)

def default_output_path(input_path: Path) -> Path:
    return input_path.with_suffix(".xml")

def run_conversion(input_path: Path, output_path: Path) -> None:
    """
    Parse, convert and write.

    :raises PlanOfWorkParseError: if the input cannot be parsed.
    :raises UnsupportedFormatError: if the output extension is unknown.
    :raises ProjectWriteError: if the output cannot be written.
    """
    # Resolve the writer first, so an unknown extension fails before any work is done.
    writer = ProjectWriterUtility.get_project_writer(output_path)
    plan = PlanOfWork.open_json(input_path)
    project = convert(plan)
    writer.write(project, output_path)

def open_with_default_application(path: Path) -> None:
    url = path.absolute().as_uri()
    print(f"Opening: {url}")
    if not webbrowser.open(url):
        print("Could not open the file automatically.")
        print("Please open this file manually:")
        print(f"  {path}")

def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description='Convert a dPOW plan of work into a schedule file (MS Project XML, CSV or HTML Gantt chart)')
    parser.add_argument('input_path', help='Path to the dPOW file')
    parser.add_argument('output_path', nargs='?', help='Path of the output file. The extension selects the format: .xml, .csv, .html. Default: input path with .xml extension')
    parser.add_argument('--no-open', action='store_true', help='Do not open the output file when done')
    args = parser.parse_args(argv)

    config = PowScheduleConfig.load()
    logging.basicConfig(
        level=getattr(logging, config.log_level),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler()
        ]
    )

    input_path = Path(args.input_path).resolve()
    if not input_path.is_file():
        print(f"Error: Input file does not exist: {input_path}")
        return 1
    output_path = Path(args.output_path) if args.output_path else default_output_path(input_path)

    try:
        run_conversion(input_path, output_path)
    except (PlanOfWorkParseError, UnsupportedFormatError, ProjectWriteError) as e:
        logger.error(f"Conversion failed: {e}")
        print(f"Error: {e}")
        return 1

    print(f"Schedule written to: {output_path}")
    if config.open_output and not args.no_open:
        open_with_default_application(output_path)
    return 0

if __name__ == "__main__":
    sys.exit(main())
