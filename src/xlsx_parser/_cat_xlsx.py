import argparse
import csv
import logging
import sys

from compact_json import Formatter

from xlsx_parser import Registry, _get_version
from xlsx_parser import __name__ as xlsx_parser_name
from xlsx_parser.cell import xl_col_to_index
from xlsx_parser.constants import MAX_COL_INDEX
from xlsx_parser.exceptions import StringNotFoundError, XlsxError

logger = logging.getLogger(xlsx_parser_name)


def command_line_parser():
    parser = argparse.ArgumentParser(description="Export data from Excel xlsx spreadsheets")
    commands = parser.add_mutually_exclusive_group()
    commands.add_argument(
        "-S",
        "--list-sheets",
        action="store_true",
        help="List the names of sheets and exit",
    )
    commands.add_argument(
        "-b",
        "--brief",
        action="store_true",
        default=False,
        help="Don't prefix data rows with name of sheet (default: false)",
    )
    commands.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Dump decoded cells as JSON instead of CSV",
    )
    parser.add_argument("-V", "--version", action="store_true")
    parser.add_argument(
        "--raw",
        action="store_true",
        help="Dump shared string indexes instead of the strings they refer to",
    )
    parser.add_argument(
        "-s", "--sheet", action="append", help="Names of sheet(s) to include in export"
    )
    parser.add_argument("document", nargs="*", help="Document(s) to export")
    parser.add_argument(
        "--debug", default=False, action="store_true", help="Enable debug logging"
    )
    return parser


def selected_sheets(args, registry, filename):
    for sheet_name in registry.sheet_names(filename):
        if args.sheet is not None and sheet_name not in args.sheet:
            continue
        yield sheet_name, registry.get_sheet(filename, sheet_name)


def print_sheet_names(registry, filename):
    for sheet_name in registry.sheet_names(filename):
        print(f"{filename}: {sheet_name}")


def cell_as_string(args, registry, filename, cell):
    if cell is None:
        return ""
    elif args.raw:
        return cell.payload
    try:
        return registry.cell_text(filename, cell)
    except StringNotFoundError:
        return "#REF!"


def row_as_strings(args, registry, filename, row):
    columns = {}
    for col_ref, cell in row.items():
        try:
            col = xl_col_to_index(col_ref)
        except IndexError:
            logger.debug("skipping cell with column reference '%s'", col_ref)
            continue
        if col > MAX_COL_INDEX:
            logger.debug("skipping cell beyond column XFD: '%s'", col_ref)
            continue
        columns[col] = cell
    num_cols = max(columns.keys()) + 1 if columns else 0
    return [cell_as_string(args, registry, filename, columns.get(col)) for col in range(num_cols)]


def print_sheets(args, registry, filename):
    writer = csv.writer(sys.stdout, dialect="excel", lineterminator="\n")
    for sheet_name, sheet in selected_sheets(args, registry, filename):
        for row_num in sorted(sheet.keys()):
            cells = row_as_strings(args, registry, filename, sheet[row_num])
            if not args.brief:
                sys.stdout.write(f"{filename}: {sheet_name}: ")
            writer.writerow(cells)


def print_json(args, registry, filename):
    sheets = {
        sheet_name: {
            str(row_num): {
                col_ref: {"kind": cell.kind.value, "payload": cell.payload}
                for col_ref, cell in row.items()
            }
            for row_num, row in sorted(sheet.items())
        }
        for sheet_name, sheet in selected_sheets(args, registry, filename)
    }
    strings = registry.shared_strings(filename)
    data = {
        "sheets": sheets,
        "shared_strings": {str(index): text for index, text in sorted(strings.items())},
    }
    formatter = Formatter()
    formatter.indent_spaces = 2
    formatter.max_inline_length = 120
    formatter.max_inline_complexity = 2
    print(formatter.serialize(data))


def main():
    parser = command_line_parser()
    args = parser.parse_args()

    if args.version:
        print(_get_version())
    elif len(args.document) == 0:
        parser.print_help()
    else:
        hdlr = logging.StreamHandler()
        hdlr.setFormatter(logging.Formatter("%(levelname)s:%(name)s:%(message)s"))
        logger.addHandler(hdlr)
        if args.debug:
            logger.setLevel("DEBUG")
        else:
            logger.setLevel("ERROR")
        registry = Registry()
        for filename in args.document:
            try:
                registry.open_document(filename)
                if args.list_sheets:
                    print_sheet_names(registry, filename)
                elif args.json:
                    print_json(args, registry, filename)
                else:
                    print_sheets(args, registry, filename)
            except XlsxError as e:
                print(str(e), file=sys.stderr)
                sys.exit(1)
            finally:
                registry.close_document(filename)


if __name__ == "__main__":
    # execute only if run as a script
    main()  # pragma: no cover
