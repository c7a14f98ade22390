#!/usr/bin/env python3
'''
Copyright 2025 Aaron Vose (avose@aaronvose.net)
Licensed under the LGPL v2.1; see the file 'LICENSE' for details.
'''

import sys
import argparse

from linkpad import __version__
from linkpad.core.log import Log
from linkpad.core.model import Folder
from linkpad.core.store import LinkStore

# Long enough that a dry run never reaches its debounced save.
DRY_RUN_DELAY = 24 * 60 * 60.0

def _print_folder(folder: Folder, depth: int = 0, out=None):
    out = out or sys.stdout
    pad = "  " * depth
    marker = "+" if folder.is_collapsed else "-"
    print(f"{pad}{marker} {folder.name}/  [{folder.id}]", file=out)
    if folder.is_collapsed:
        return
    for sub in folder.subfolders:
        _print_folder(sub, depth + 1, out)
    for entry in folder.entries:
        print(f"{pad}    {entry.text}  [{entry.id}]", file=out)

def _report(changed, what: str) -> int:
    if changed:
        return 0
    print(f"Nothing changed: {what}", file=sys.stderr)
    return 1

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="linkpad", description="LinkPad bookmark and notes organizer")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--data",
        default=None,
        help="Path of the document file (default: $LINKPAD_HOME/linkpad.json or ~/Documents/LinkPad/linkpad.json)"
    )
    parser.add_argument(
        "--verbosity",
        type=int, default=0,
        help="Set verbosity level (0=quiet, 1=normal, 2=verbose)"
    )
    parser.add_argument(
        "--log-file",
        default=None,
        help="Write the debug log to this file on exit."
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Run the command but leave the document file untouched."
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("tree", help="Print the folder tree with ids")

    p = sub.add_parser("add", help="Add an entry (URL or path)")
    p.add_argument("text")
    p.add_argument("--to", default=None, help="Folder id, or an entry id to add beside")

    p = sub.add_parser("mkdir", help="Create a folder")
    p.add_argument("name")
    p.add_argument("--parent", default=None, help="Parent folder id (default: root)")

    p = sub.add_parser("rename", help="Rename a folder")
    p.add_argument("id")
    p.add_argument("name")

    p = sub.add_parser("rm", help="Delete a folder (with contents) or an entry")
    p.add_argument("id")

    p = sub.add_parser("mv", help="Move a folder or entry into another folder")
    p.add_argument("id")
    p.add_argument("dest")

    p = sub.add_parser("collapse", help="Toggle a folder's collapsed flag")
    p.add_argument("id")

    p = sub.add_parser("import", help="Import a .json document, .plist bookmarks, or text,date lines")
    p.add_argument("path")
    p.add_argument("--yes", action="store_true", help="Confirm replacing the document on .json import")

    p = sub.add_parser("export", help="Export to .json (full document) or text,date lines")
    p.add_argument("path")

    p = sub.add_parser("search", help="List entries containing QUERY, sorted by text")
    p.add_argument("query", nargs="?", default="")
    p.add_argument("--desc", action="store_true", help="Sort descending")

    p = sub.add_parser("notes", help="Print or replace the notes text")
    p.add_argument("--set", dest="text", default=None, help="New notes text")

    p = sub.add_parser("replace", help="Find and replace in the notes")
    p.add_argument("query")
    p.add_argument("replacement")
    p.add_argument("--case", action="store_true", help="Case sensitive")
    p.add_argument("--words", action="store_true", help="Whole words only")
    p.add_argument("--nth", type=int, default=None, help="Replace only the Nth match (1-based)")

    return parser

def run_command(store: LinkStore, args) -> int:
    cmd = args.command

    if cmd == "tree":
        _print_folder(store.root)
        return 0

    if cmd == "add":
        folder_id = store.containing_folder_id(args.to)
        entry_id = store.new_entry(args.text, folder_id)
        if entry_id:
            print(entry_id)
        return _report(entry_id, "entry text is blank")

    if cmd == "mkdir":
        folder_id = store.create_folder(args.name, args.parent or store.root.id)
        if folder_id:
            print(folder_id)
        return _report(folder_id, f"no folder {args.parent}")

    if cmd == "rename":
        return _report(store.rename_folder(args.id, args.name), f"can't rename {args.id}")

    if cmd == "rm":
        if store.find_folder(args.id) is not None:
            return _report(store.delete_folder(args.id), f"can't delete {args.id}")
        return _report(store.delete_entry(args.id), f"no item {args.id}")

    if cmd == "mv":
        if store.find_folder(args.id) is not None:
            return _report(store.move_folder(args.id, args.dest), f"can't move {args.id} into {args.dest}")
        return _report(store.move_entry(args.id, args.dest), f"can't move {args.id} into {args.dest}")

    if cmd == "collapse":
        return _report(store.toggle_folder_collapsed(args.id), f"can't collapse {args.id}")

    if cmd == "import":
        result = store.import_file(args.path, confirm_replace=lambda _question: args.yes)
        return 0 if result is not None else 1

    if cmd == "export":
        return 0 if store.export_file(args.path) else 1

    if cmd == "search":
        for entry in store.search_entries(args.query, ascending=not args.desc):
            print(f"{entry.text}\t{entry.created_at.strftime('%Y-%m-%d')}\t{entry.id}")
        return 0

    if cmd == "notes":
        if args.text is None:
            sys.stdout.write(store.notes)
            if store.notes and not store.notes.endswith("\n"):
                sys.stdout.write("\n")
            return 0
        store.set_notes(args.text)
        return 0

    if cmd == "replace":
        count = store.replace_in_notes(args.query, args.replacement, args.case, args.words,
                                       occurrence=args.nth)
        print(f"{count} replaced")
        return 0

    raise ValueError(f"Unknown command: {cmd}")

def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    Log.set_verbosity(args.verbosity)

    store = LinkStore.open(
        args.data,
        delay=DRY_RUN_DELAY if args.dry_run else None,
        on_alert=lambda message: print(message, file=sys.stderr),
    )
    status = 1
    try:
        status = run_command(store, args)
    finally:
        if args.dry_run:
            if store.persistence.cancel():
                Log.debug("Dry run: discarded pending save", 1)
            saved = True
        else:
            saved = store.close()
        if args.log_file:
            Log.write_to_file(args.log_file)
    return status if saved else 1

if __name__ == "__main__":
    sys.exit(main())
