# domain_recon.py
#!/usr/bin/env python3
"""
Async bulk domain reconnaissance crawler.

Given a list of candidate domains (stdin, a file, or the YAML config) and a
keyword list, this tool:

- Resolves a working scheme per domain (HTTPS probe, HTTP fallback)
- Fetches each landing page exactly once and extracts keywords, favicons,
  contact emails and same-host links
- Follows every same-host link one hop deep (never further) for more emails
  and keyword hits
- Upserts one record per domain into a shared JSON array as soon as that
  domain completes, using write-to-temp + atomic rename under a single lock

Concurrency is two-level: a pool of domain workers, and for each domain a
bounded fan-out over its internal links. `max_in_flight` optionally caps the
total number of HTTP requests across both levels.

TLS verification is disabled and nothing is retried.
"""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import dataclasses
import hashlib
import json
import logging
import os
import re
import sys
import threading
from datetime import date
from pathlib import Path
from typing import IO, Iterable, Optional
from urllib.parse import urldefrag, urljoin, urlsplit

import httpx
import yaml
from bs4 import BeautifulSoup
from slugify import slugify

__version__ = "0.1.0"


# --------------------------- Configuration --------------------------------- #


DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; DomainRecon/0.1)"


@dataclasses.dataclass(frozen=True)
class Config:
    wordlist: str = "keywords.txt"
    output: str = "programs.json"
    timeout: float = 30.0  # seconds per request
    concurrency: int = 50
    link_concurrency: int = 0  # 0 = same as concurrency
    max_in_flight: int = 0  # 0 = no global cap on concurrent requests
    user_agent: str = DEFAULT_USER_AGENT
    log_file: Optional[str] = None
    silent: bool = False
    verbose: bool = False
    domains: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.concurrency < 1:
            raise ValueError(f"concurrency must be at least 1, got {self.concurrency}")
        if self.link_concurrency < 0:
            raise ValueError(f"link_concurrency must be 0 or more, got {self.link_concurrency}")
        if self.max_in_flight < 0:
            raise ValueError(f"max_in_flight must be 0 or more, got {self.max_in_flight}")
        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")

    @property
    def effective_link_concurrency(self) -> int:
        return self.link_concurrency if self.link_concurrency > 0 else self.concurrency

    @staticmethod
    def from_yaml(path: Path) -> "Config":
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        return Config(
            wordlist=str(data.get("wordlist", "keywords.txt")),
            output=str(data.get("output", "programs.json")),
            timeout=float(data.get("timeout", 30.0)),
            concurrency=int(data.get("concurrency", 50)),
            link_concurrency=int(data.get("link_concurrency", 0)),
            max_in_flight=int(data.get("max_in_flight", 0)),
            user_agent=data.get("user_agent", DEFAULT_USER_AGENT),
            log_file=data.get("log_file"),
            silent=bool(data.get("silent", False)),
            verbose=bool(data.get("verbose", False)),
            domains=tuple(str(d).strip() for d in (data.get("domains", []) or ()) if str(d).strip()),
        )

    def with_overrides(self, **overrides) -> "Config":
        """Return a copy with every non-None override applied (CLI beats YAML)."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return dataclasses.replace(self, **changes)


# ----------------------------- Utilities ----------------------------------- #


ABSENT = "-"


def sha1_short(s: str) -> str:
    return hashlib.sha1(s.encode("utf-8", errors="ignore")).hexdigest()[:10]


def site_slug(url: str) -> str:
    netloc = urlsplit(url).netloc or url
    slug = slugify(netloc, max_length=80, allow_unicode=False).strip("-_.")
    return slug or sha1_short(url)


def url_host(url: str) -> str:
    """Host (with port) of `url`, lowercased and without userinfo."""
    netloc = urlsplit(url).netloc.lower()
    if "@" in netloc:
        netloc = netloc.split("@", 1)[-1]
    return netloc


def response_text(resp: httpx.Response) -> str:
    try:
        return resp.text
    except (UnicodeDecodeError, LookupError):
        return resp.content.decode("utf-8", errors="replace")


# ----------------------------- Logging ------------------------------------- #


LOGGER_NAME = "domain_recon"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(site)s] %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


class _DefaultSiteFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "site"):
            record.site = ABSENT
        return True


def setup_root_logger(verbose: bool = False, log_file: Optional[str] = None) -> None:
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT)
    level = logging.DEBUG if verbose else logging.INFO
    root_logger = logging.getLogger(LOGGER_NAME)
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    handlers: list[logging.Handler] = [logging.StreamHandler(stream=sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        handler.addFilter(_DefaultSiteFilter())
        root_logger.addHandler(handler)


def get_site_logger(url: str) -> logging.LoggerAdapter:
    return logging.LoggerAdapter(logging.getLogger(LOGGER_NAME), extra={"site": site_slug(url)})


fleet_logger = logging.LoggerAdapter(logging.getLogger(LOGGER_NAME), extra={"site": "ALL"})


# ---------------------------- Request Gate --------------------------------- #


class RequestGate:
    """Optional process-wide cap on concurrent HTTP requests.

    Domain workers and link tasks nest, so without a cap the number of
    requests in flight can reach concurrency * link_concurrency. A limit of
    0 leaves requests unbounded apart from those two pools.
    """

    def __init__(self, limit: int = 0):
        self.limit = max(0, limit)
        self._sem = asyncio.Semaphore(self.limit) if self.limit else None

    async def __aenter__(self) -> "RequestGate":
        if self._sem is not None:
            await self._sem.acquire()
        return self

    async def __aexit__(self, *exc_info) -> None:
        if self._sem is not None:
            self._sem.release()


NO_GATE = RequestGate(0)

# httpx.InvalidURL does not derive from httpx.HTTPError
FETCH_ERRORS = (httpx.HTTPError, httpx.InvalidURL)


# --------------------------- URL Normalizer -------------------------------- #


async def ensure_scheme(
    client: httpx.AsyncClient,
    raw: str,
    *,
    gate: Optional[RequestGate] = None,
    logger: Optional[logging.LoggerAdapter] = None,
) -> str:
    """Return `raw` with an explicit scheme, probing HTTPS when none is given."""
    if raw.startswith(("http://", "https://")):
        return raw
    https_url = f"https://{raw}"
    try:
        async with gate or NO_GATE:
            resp = await client.head(https_url)
        if resp.is_success:
            return https_url
    except FETCH_ERRORS as e:
        (logger or fleet_logger).debug(f"HTTPS probe failed for {raw}: {e}")
    return f"http://{raw}"


# ------------------------------ Extraction --------------------------------- #


EXCLUDE_PATTERNS = (
    ".jpg", ".png", ".gif", ".webp", ".ico", ".mp4", ".pdf", ".eot",
    ".doc", ".docx", ".xls", ".xlsx", ".woff", ".woff2", ".css", ".json",
    ".xml", ".rss", ".svg", ".yaml", ".yml", ".csv", ".dockerfile", ".cfg",
    ".lock", ".js", ".md", ".toml",
)

EMAIL_RE = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")
HREF_PATTERNS = (
    re.compile(r'href="([^"]*)"'),
    re.compile(r"href='([^']*)'"),
)
FAVICON_RELS = {"icon", "shortcut icon"}
FAVICON_EXTENSIONS = (".png", ".ico")
INVALID_EMAIL_MARKERS = ("example", "email", ".png", ".jpg", ".webp", ".gif")


def match_keywords(body: str, keywords: Iterable[str]) -> list[str]:
    return [kw for kw in keywords if kw in body]


def match_keywords_in_url(url: str, keywords: Iterable[str]) -> list[str]:
    lowered = url.lower()
    return [kw for kw in keywords if kw.lower() in lowered]


def truncate_favicon_url(url: str) -> str:
    # .png wins over .ico; the host is never searched, so cdn.icons8.com stays whole
    netloc = urlsplit(url).netloc
    start = url.find(netloc) + len(netloc) if netloc else 0
    for ext in FAVICON_EXTENSIONS:
        i = url.find(ext, start)
        if i != -1:
            return url[: i + len(ext)]
    return url


def favicon_urls_from_html(html: str, base_url: str) -> list[str]:
    try:
        soup = BeautifulSoup(html, "lxml")
    except Exception as e:
        fleet_logger.debug(f"Could not parse HTML from {base_url} for favicons: {e}")
        return []
    favicons: list[str] = []
    for link in soup.find_all("link", href=True):
        rel = link.get("rel") or []
        if isinstance(rel, str):
            rel = rel.split()
        if " ".join(rel).lower() not in FAVICON_RELS:
            continue
        href = link.get("href", "").strip()
        if not href:
            continue
        try:
            favicons.append(truncate_favicon_url(urljoin(base_url, href)))
        except ValueError:
            continue
    return favicons


async def fallback_favicon(
    client: httpx.AsyncClient, base_url: str, *, gate: Optional[RequestGate] = None
) -> list[str]:
    favicon_url = urljoin(base_url, "/favicon.ico")
    try:
        async with gate or NO_GATE:
            resp = await client.get(favicon_url)
    except FETCH_ERRORS:
        return []
    return [favicon_url] if resp.status_code == 200 else []


def select_shortest_favicon(favicons: list[str]) -> str:
    if not favicons:
        return ""
    # min() keeps the first of several equally short candidates
    return min(favicons, key=len)


def should_exclude(link: str) -> bool:
    lowered = link.lower()
    return any(pattern in lowered for pattern in EXCLUDE_PATTERNS)


def is_valid_email(candidate: str) -> bool:
    if len(candidate) < 5:
        return False
    lowered = candidate.lower()
    return not any(marker in lowered for marker in INVALID_EMAIL_MARKERS)


def find_emails(text: str) -> set[str]:
    return {m for m in EMAIL_RE.findall(text) if m and is_valid_email(m)}


def extract_emails_and_links(html: str, page_url: str, base_url: str) -> tuple[set[str], set[str]]:
    """
    Pull emails and same-host links out of raw HTML with plain regexes.

    `page_url` is what relative hrefs resolve against; `base_url` is the
    domain whose host a link must share to count as internal. mailto: hrefs
    only ever yield emails. The whole body is scanned for emails at the end
    to catch addresses that are not inside an anchor.
    """
    emails: set[str] = set()
    links: set[str] = set()
    base_host = url_host(base_url)

    for pattern in HREF_PATTERNS:
        for href in pattern.findall(html):
            href = href.strip()
            if should_exclude(href):
                continue
            if href.lower().startswith("mailto:"):
                emails |= find_emails(href[len("mailto:"):])
                continue
            emails |= find_emails(href)
            try:
                resolved, _ = urldefrag(urljoin(page_url, href))
                parts = urlsplit(resolved)
            except ValueError:
                continue
            if parts.scheme not in ("http", "https"):
                continue
            host = url_host(resolved)
            if host and host == base_host:
                links.add(resolved)

    emails |= find_emails(html)
    return emails, links


# ------------------------ Single-Domain Processor -------------------------- #


class DomainFetchError(Exception):
    """The landing page of a domain could not be fetched or read."""


@dataclasses.dataclass
class DomainData:
    url: str
    keywords: set[str] = dataclasses.field(default_factory=set)
    favicons: list[str] = dataclasses.field(default_factory=list)
    emails: set[str] = dataclasses.field(default_factory=set)
    internal_links: set[str] = dataclasses.field(default_factory=set)


@dataclasses.dataclass
class LinkSignals:
    emails: set[str] = dataclasses.field(default_factory=set)
    keywords: set[str] = dataclasses.field(default_factory=set)
    matched_link: Optional[str] = None


async def scan_internal_link(
    client: httpx.AsyncClient,
    link: str,
    base_url: str,
    keywords: list[str],
    *,
    gate: Optional[RequestGate] = None,
    logger: Optional[logging.LoggerAdapter] = None,
) -> LinkSignals:
    """
    Collect signals from one internal link.

    The URL text is checked for keywords first, then the page is always
    fetched for emails and body keywords. Links found on this page are
    dropped: the crawl never goes deeper than one hop. Fetch failures are
    logged and leave only the URL-text result.
    """
    logger = logger or get_site_logger(base_url)
    signals = LinkSignals(keywords=set(match_keywords_in_url(link, keywords)))
    matched = bool(signals.keywords)

    try:
        async with gate or NO_GATE:
            resp = await client.get(link)
    except FETCH_ERRORS as e:
        logger.debug(f"Internal link failed {link}: {e}")
    else:
        if resp.status_code == 200:
            body = response_text(resp)
            body_keywords = match_keywords(body, keywords)
            emails, _ = extract_emails_and_links(body, link, base_url)
            signals.emails |= emails
            signals.keywords.update(body_keywords)
            matched = matched or bool(body_keywords)
        else:
            logger.debug(f"Internal link {link} returned HTTP {resp.status_code}")

    if matched:
        signals.matched_link = link
    return signals


async def process_domain(
    client: httpx.AsyncClient,
    domain: str,
    keywords: list[str],
    concurrency: int,
    *,
    gate: Optional[RequestGate] = None,
    logger: Optional[logging.LoggerAdapter] = None,
) -> DomainData:
    """
    Collect every signal for one domain.

    The landing page is fetched once and feeds the keyword matcher, the
    favicon resolver and the email/link extractor. Each same-host link then
    gets its own task, at most `concurrency` at a time. Raises
    DomainFetchError if the landing page cannot be fetched; failures on
    individual links are swallowed.
    """
    gate = gate or NO_GATE
    logger = logger or get_site_logger(domain)

    url = await ensure_scheme(client, domain, gate=gate, logger=logger)
    data = DomainData(url=url)

    try:
        async with gate:
            resp = await client.get(url)
        html = response_text(resp)
    except FETCH_ERRORS as e:
        raise DomainFetchError(f"failed to fetch domain {url}: {e}") from e

    landing_keywords = match_keywords(html, keywords)
    data.keywords.update(landing_keywords)

    data.favicons = favicon_urls_from_html(html, url)
    if not data.favicons:
        data.favicons = await fallback_favicon(client, url, gate=gate)

    emails, links = extract_emails_and_links(html, url, url)
    data.emails |= emails
    logger.debug(
        f"Landing page {url}: {len(landing_keywords)} keyword(s), "
        f"{len(emails)} email(s), {len(links)} internal link(s)"
    )

    if links:
        sem = asyncio.Semaphore(max(1, concurrency))

        async def _guarded(link: str) -> LinkSignals:
            async with sem:
                try:
                    return await scan_internal_link(client, link, url, keywords, gate=gate, logger=logger)
                except Exception as e:
                    logger.exception(f"Unhandled error scanning internal link {link}: {e}")
                    return LinkSignals()

        for signals in await asyncio.gather(*(_guarded(link) for link in sorted(links))):
            data.emails |= signals.emails
            data.keywords |= signals.keywords
            if signals.matched_link:
                data.internal_links.add(signals.matched_link)

    # A landing page that matched is itself a hit
    if landing_keywords:
        data.internal_links.add(url)

    return data


# --------------------------- Result Aggregator ----------------------------- #


@dataclasses.dataclass
class DomainResult:
    name: str
    logo: str
    internal_link: list[str]
    email: list[str]
    matched: list[str]
    last_updated: str

    def to_dict(self) -> dict:
        return dataclasses.asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "DomainResult":
        return cls(
            name=data["name"],
            logo=data.get("logo", ABSENT),
            internal_link=list(data.get("internal_link") or []),
            email=list(data.get("email") or [ABSENT]),
            matched=list(data.get("matched") or []),
            last_updated=data.get("last_updated", ""),
        )


def build_result(
    data: DomainData, keywords: Optional[list[str]] = None, today: Optional[date] = None
) -> DomainResult:
    if keywords:
        matched = [kw for kw in dict.fromkeys(keywords) if kw in data.keywords]
    else:
        matched = sorted(data.keywords)
    return DomainResult(
        name=data.url,
        logo=select_shortest_favicon(data.favicons) or ABSENT,
        internal_link=sorted(data.internal_links),
        email=sorted(data.emails) or [ABSENT],
        matched=matched,
        last_updated=(today or date.today()).isoformat(),
    )


# ---------------------------- Persistence ---------------------------------- #


class ResultStore:
    """JSON array of domain records on disk, upserted by `name`.

    Every upsert runs read-modify-write under one process-wide lock and lands
    through a sibling temp file plus os.replace, so readers only ever see a
    complete array.
    """

    _lock = threading.Lock()

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self.tmp_path = self.path.with_name(self.path.name + ".tmp")

    def initialize(self) -> None:
        with self._lock:
            if not self.path.exists():
                self.path.write_text("[]\n", encoding="utf-8")

    def load(self) -> list[dict]:
        if not self.path.exists():
            return []
        try:
            raw = self.path.read_text(encoding="utf-8")
            if not raw.strip():
                return []
            data = json.loads(raw)
        except ValueError as e:
            fleet_logger.warning(f"Could not parse {self.path}, treating it as empty: {e}")
            return []
        if not isinstance(data, list):
            fleet_logger.warning(f"{self.path} does not hold a JSON array, treating it as empty")
            return []
        return [
            DomainResult.from_dict(entry).to_dict()
            for entry in data
            if isinstance(entry, dict) and "name" in entry
        ]

    def upsert(self, result: DomainResult) -> None:
        record = result.to_dict()
        with self._lock:
            records = self.load()
            for i, existing in enumerate(records):
                if existing.get("name") == record["name"]:
                    records[i] = record
                    break
            else:
                records.append(record)

            payload = json.dumps(records, indent=4, ensure_ascii=False)
            try:
                self.tmp_path.write_text(payload, encoding="utf-8")
                os.replace(self.tmp_path, self.path)
            except OSError:
                with contextlib.suppress(OSError):
                    self.tmp_path.unlink()
                raise


# ------------------------------ Fleet -------------------------------------- #


@dataclasses.dataclass
class FleetStats:
    processed: int = 0
    failed: int = 0
    persist_errors: int = 0


def build_client(cfg: Config) -> httpx.AsyncClient:
    headers = {
        "User-Agent": cfg.user_agent,
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        "Accept-Language": "en;q=0.7, *;q=0.5",
    }
    max_connections = cfg.concurrency * cfg.effective_link_concurrency + cfg.concurrency
    limits = httpx.Limits(max_keepalive_connections=min(max_connections, 100), max_connections=max_connections)
    return httpx.AsyncClient(
        headers=headers,
        limits=limits,
        timeout=httpx.Timeout(cfg.timeout),
        follow_redirects=True,
        verify=False,
        trust_env=True,
    )


class Fleet:
    """Runs process_domain over many domains and persists each result."""

    def __init__(self, keywords: list[str], cfg: Config, store: ResultStore) -> None:
        self.keywords = keywords
        self.cfg = cfg
        self.store = store
        self.gate = RequestGate(cfg.max_in_flight)
        self.link_concurrency = cfg.effective_link_concurrency
        self.stats = FleetStats()

    async def run(self, domains: list[str], client: Optional[httpx.AsyncClient] = None) -> FleetStats:
        if client is not None:
            await self._drain(domains, client)
        else:
            async with build_client(self.cfg) as owned:
                await self._drain(domains, owned)
        return self.stats

    async def _drain(self, domains: list[str], client: httpx.AsyncClient) -> None:
        queue: asyncio.Queue[str] = asyncio.Queue()
        for domain in domains:
            queue.put_nowait(domain)

        n_workers = max(1, min(self.cfg.concurrency, len(domains)))
        workers = [asyncio.create_task(self._worker(queue, client)) for _ in range(n_workers)]
        await queue.join()
        for w in workers:
            w.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await asyncio.gather(*workers)

    async def _worker(self, queue: asyncio.Queue[str], client: httpx.AsyncClient) -> None:
        while True:
            domain = await queue.get()
            try:
                await self._process_and_store(client, domain)
            except Exception as e:
                self.stats.failed += 1
                fleet_logger.exception(f"Unhandled error processing {domain}: {e}")
            finally:
                queue.task_done()

    async def _process_and_store(self, client: httpx.AsyncClient, domain: str) -> None:
        logger = get_site_logger(domain)
        try:
            data = await process_domain(
                client, domain, self.keywords, self.link_concurrency, gate=self.gate, logger=logger
            )
        except DomainFetchError as e:
            self.stats.failed += 1
            logger.log(logging.WARNING if self.cfg.verbose else logging.DEBUG, f"Error processing {domain}: {e}")
            return

        result = build_result(data, self.keywords)
        try:
            await asyncio.to_thread(self.store.upsert, result)
        except OSError as e:
            self.stats.persist_errors += 1
            logger.warning(f"Error updating JSON file for {domain}: {e}")
            return

        self.stats.processed += 1
        logger.info(f"Processed: {domain}")


async def run_fleet(
    domains: list[str],
    keywords: list[str],
    cfg: Config,
    store: ResultStore,
    client: Optional[httpx.AsyncClient] = None,
) -> FleetStats:
    return await Fleet(keywords, cfg, store).run(domains, client=client)


# --------------------------- Inputs & Banner ------------------------------- #


BANNER = r"""
    ____                        _          ____
   / __ \____  ____ ___  ____ _(_)___     / __ \___  _________  ____
  / / / / __ \/ __ `__ \/ __ `/ / __ \   / /_/ / _ \/ ___/ __ \/ __ \
 / /_/ / /_/ / / / / / / /_/ / / / / /  / _, _/  __/ /__/ /_/ / / / /
/_____/\____/_/ /_/ /_/\__,_/_/_/ /_/  /_/ |_|\___/\___/\____/_/ /_/
"""


def print_version() -> None:
    print(f"Current domain-recon version {__version__}")


def print_banner() -> None:
    print(f"{BANNER}\n{'Current domain-recon version ' + __version__:>60}\n")


def load_keywords(wordlist: str) -> list[str]:
    """Keywords from a file (one per line) or else a comma-separated string."""
    path = Path(wordlist)
    if path.is_file():
        with path.open("r", encoding="utf-8") as f:
            keywords = [line.strip() for line in f if line.strip()]
    else:
        keywords = [part.strip() for part in wordlist.split(",") if part.strip()]
    if not keywords:
        raise ValueError("no keywords found in wordlist")
    return keywords


def read_domains(stream: IO[str]) -> list[str]:
    return [line.strip() for line in stream if line.strip()]


# ------------------------------- CLI --------------------------------------- #


def parse_args(argv: Optional[Iterable[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="domain-recon",
        description="Crawl domains one hop deep for keywords, favicons, emails and internal links.",
    )
    parser.add_argument(
        "-w", "--wordlist",
        help='Keyword file, or comma-separated keywords (e.g. "Stranger Things,The Family Man"). Default: keywords.txt',
    )
    parser.add_argument("-o", "--output", help="Output JSON file. Default: programs.json")
    parser.add_argument("-t", "--timeout", type=float, help="Timeout for each HTTP request in seconds. Default: 30")
    parser.add_argument("-c", "--concurrency", type=int, help="Domains processed concurrently. Default: 50")
    parser.add_argument(
        "--link-concurrency", type=int, help="Internal links fetched concurrently per domain. Default: same as -c"
    )
    parser.add_argument(
        "--max-in-flight", type=int, help="Global cap on concurrent HTTP requests (0 = no cap). Default: 0"
    )
    parser.add_argument("-l", "--list", type=Path, help="File with one domain per line. Default: stdin")
    parser.add_argument("--config", type=Path, help="Path to YAML configuration file.")
    parser.add_argument("--log-file", help="Also write logs to this file.")
    parser.add_argument("--silent", action="store_true", help="Do not print the banner.")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging and per-domain errors.")
    parser.add_argument("--version", action="store_true", help="Print the version and exit.")
    return parser.parse_args(argv)


def load_config(args: argparse.Namespace) -> Config:
    cfg = Config.from_yaml(args.config) if args.config else Config()
    return cfg.with_overrides(
        wordlist=args.wordlist,
        output=args.output,
        timeout=args.timeout,
        concurrency=args.concurrency,
        link_concurrency=args.link_concurrency,
        max_in_flight=args.max_in_flight,
        log_file=args.log_file,
        silent=args.silent or None,
        verbose=args.verbose or None,
    )


def collect_domains(args: argparse.Namespace, cfg: Config, stdin: IO[str]) -> list[str]:
    if args.list:
        with args.list.open("r", encoding="utf-8") as f:
            return read_domains(f)
    domains = [] if stdin.isatty() else read_domains(stdin)
    return domains or list(cfg.domains)


async def main_async(cfg: Config, domains: list[str]) -> int:
    try:
        keywords = load_keywords(cfg.wordlist)
    except (OSError, ValueError) as e:
        fleet_logger.error(f"Error loading keywords: {e}")
        return 1

    if not domains:
        fleet_logger.warning("No domains provided")
        return 0

    store = ResultStore(cfg.output)
    try:
        store.initialize()
    except OSError as e:
        fleet_logger.warning(f"Could not initialize output file: {e}")

    fleet_logger.info(f"Starting recon for {len(domains)} domain(s) with {len(keywords)} keyword(s)")
    stats = await run_fleet(domains, keywords, cfg, store)
    fleet_logger.info(
        f"Done: {stats.processed} processed, {stats.failed} failed, {stats.persist_errors} not saved"
    )
    fleet_logger.info(f"All domains processed. Results saved to: {cfg.output}")
    return 0


def main() -> None:
    args = parse_args()
    try:
        cfg = load_config(args)
    except (OSError, ValueError, yaml.YAMLError) as e:
        sys.exit(f"Error loading config: {e}")

    setup_root_logger(cfg.verbose, cfg.log_file)

    if args.version:
        print_banner()
        print_version()
        return
    if not cfg.silent:
        print_banner()

    try:
        domains = collect_domains(args, cfg, sys.stdin)
    except OSError as e:
        fleet_logger.error(f"Error reading domains: {e}")
        sys.exit(1)

    try:
        code = asyncio.run(main_async(cfg, domains))
    except KeyboardInterrupt:
        code = 130
    sys.exit(code)


if __name__ == "__main__":
    main()
