import argparse
import dataclasses
import json
import sys
from pathlib import Path

from wikiscan import WikiApi, parse_html, parse_templates
from wikiscan.utils import capitalize_first_letter


def get_wikitext(args):
    if args.file is not None:
        with Path(args.file).open(encoding="utf-8") as f:
            return f.read()
    api = WikiApi(
        url=f"https://{args.domain}/w/api.php", quiet=not args.verbose
    )
    page = api.read(args.title)
    if page is None:
        sys.exit(f"Could not read {args.title}")
    if page is False:
        sys.exit(f"{args.title} does not exist")
    return page["content"]


def main():
    """
    Print the templates (or, with --html, the HTML-like tags) of a wiki page
    or a local file as JSON.
    """
    parser = argparse.ArgumentParser()
    parser.add_argument("title", nargs="?", help="Page title")
    parser.add_argument(
        "--domain",
        default="en.wikipedia.org",
        help="MediaWiki domain, for example: en.wiktionary.org",
    )
    parser.add_argument("--file", help="Read wikitext from this file instead")
    parser.add_argument(
        "--html", action="store_true", help="Print tags instead of templates"
    )
    parser.add_argument(
        "--no-recursive",
        action="store_true",
        help="Only print templates that are not inside other templates",
    )
    parser.add_argument(
        "--name",
        action="append",
        help="Only print templates with this name (may be repeated)",
    )
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args()
    if args.title is None and args.file is None:
        parser.error("either a title or --file is required")

    text = get_wikitext(args)
    if args.html:
        records = parse_html(text)
    else:
        names = None
        if args.name:
            names = {capitalize_first_letter(x) for x in args.name}
        records = parse_templates(
            text,
            recursive=not args.no_recursive,
            name_predicate=(lambda x: x in names) if names else None,
        )
    json.dump(
        [dataclasses.asdict(x) for x in records],
        sys.stdout,
        ensure_ascii=False,
        indent=2,
    )
    print()


if __name__ == "__main__":
    sys.exit(main())
