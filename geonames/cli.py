"""CLI entrypoint for the GeoNames dump and web-service clients."""

from __future__ import annotations

import argparse
import dataclasses
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import IO, Iterator

from geonames.common.config_loader import ClientSettings, load_settings
from geonames.common.constants import CITIES_SIZES, EXIT_HARD_FAIL, EXIT_SERVICE_ERROR, EXIT_SUCCESS
from geonames.common.errors import GeoNamesError, ResponseError
from geonames.common.fs import ensure_dir, write_json_line
from geonames.common.logging import build_logger, log_event
from geonames.download.client import DumpClient
from geonames.webservice.client import WebClient
from geonames.webservice.queries import GetRequest, SearchRequest

# Dataset name -> DumpClient method taking only a sink.
DATASETS = {
    "all-countries": "all_countries",
    "no-country": "no_country",
    "modifications": "modifications",
    "deletes": "deletes",
    "alternate-names": "alternate_names",
    "alternate-names-modifications": "alternate_names_modifications",
    "alternate-names-deletes": "alternate_names_deletes",
    "hierarchy": "hierarchy",
    "user-tags": "user_tags",
    "admin-division-first": "admin_division_first",
    "admin-division-second": "admin_division_second",
    "admin-division-fifth": "admin_division_fifth",
    "country-info": "country_info",
    "time-zones": "time_zones",
    "languages": "languages",
}
PARAMETRIZED_DATASETS = ("by-country", "cities", "feature-codes")


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--config", default=None)
    parser.add_argument("--overlay-config", default=None)
    parser.add_argument("--username", default=None)
    parser.add_argument("--log-level", default=None, choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    sub = parser.add_subparsers(dest="command", required=True)

    dump = sub.add_parser("dump", help="stream a dump dataset as JSON lines")
    dump.add_argument("dataset", choices=[*DATASETS, *PARAMETRIZED_DATASETS])
    dump.add_argument("--country", default=None)
    dump.add_argument("--size", type=int, default=15000, choices=CITIES_SIZES)
    dump.add_argument("--lang", default="en")
    dump.add_argument("--out", default=None)

    search = sub.add_parser("search", help="full-text search over toponyms")
    search.add_argument("--q", required=True)
    search.add_argument("--max-rows", type=int, default=10)

    get = sub.add_parser("get", help="fetch one toponym by id")
    get.add_argument("--geoname-id", type=int, required=True)

    return parser.parse_args(argv)


def build_dump_client(settings: ClientSettings, logger) -> DumpClient:
    return DumpClient.from_settings(settings.download, logger=logger)


def build_web_client(settings: ClientSettings, username: str | None, logger) -> WebClient:
    web = settings.webservice
    if username:
        web = dataclasses.replace(web, username=username)
    return WebClient.from_settings(web, logger=logger)


@contextmanager
def _output(path: str | None) -> Iterator[IO[str]]:
    if path is None:
        yield sys.stdout
        return
    out_path = Path(path)
    ensure_dir(out_path.parent)
    with out_path.open("w", encoding="utf-8") as f:
        yield f


def run_dump(args: argparse.Namespace, client: DumpClient) -> int:
    with _output(args.out) as out:

        def sink(record) -> None:
            write_json_line(out, record.to_dict())

        if args.dataset == "by-country":
            if not args.country:
                raise ValueError("dataset by-country requires --country")
            client.by_country(args.country, sink)
        elif args.dataset == "cities":
            client.cities(args.size, sink)
        elif args.dataset == "feature-codes":
            client.feature_codes(args.lang, sink)
        else:
            getattr(client, DATASETS[args.dataset])(sink)
    return EXIT_SUCCESS


def run_web(args: argparse.Namespace, client: WebClient) -> int:
    if args.command == "search":
        results = client.search(SearchRequest(query=args.q, max_rows=args.max_rows))
        write_json_line(sys.stdout, [item.to_dict() for item in results])
    else:
        result = client.get(GetRequest(geoname_id=args.geoname_id))
        write_json_line(sys.stdout, result.to_dict())
    return EXIT_SUCCESS


def run_command(args: argparse.Namespace) -> int:
    config_path = Path(args.config) if args.config else None
    overlay_path = Path(args.overlay_config) if args.overlay_config else None
    settings = load_settings(config_path, overlay_path=overlay_path)

    level = args.log_level or settings.logging.level
    log_path = Path(settings.logging.path) if settings.logging.path else None
    logger = build_logger("geonames", level=level, log_path=log_path)

    try:
        if args.command == "dump":
            client = build_dump_client(settings, logger.getChild("download"))
            return run_dump(args, client)
        client = build_web_client(settings, args.username, logger.getChild("webservice"))
        return run_web(args, client)
    except ResponseError as exc:
        log_event(
            logger,
            str(exc),
            operation=args.command,
            event="COMMAND_FAIL",
            status="error",
            error_code=exc.error_code,
        )
        return EXIT_SERVICE_ERROR
    except GeoNamesError as exc:
        log_event(
            logger,
            str(exc),
            operation=args.command,
            event="COMMAND_FAIL",
            status="error",
            error_code=exc.error_code,
        )
        return EXIT_HARD_FAIL


def main(argv: list[str] | None = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    try:
        return run_command(args)
    except GeoNamesError:
        return EXIT_HARD_FAIL
    except Exception:
        return EXIT_HARD_FAIL


if __name__ == "__main__":
    raise SystemExit(main())
