"""CLI 入口"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any

import pydantic
import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .common.config import CrawlConfig, config
from .common.exceptions import FinSpiderError
from .common.logger import get_crawler_logger, get_extractor_logger, setup_file_logging
from .crawler import CrawlSummary
from .extractor import ExtractionConfig, OutcomeStatus, RecordAssembler
from .pipeline import run_crawl

app = typer.Typer(
    name="finspider",
    help="FinSpider CLI - 金融产品页爬取与字段抽取",
    add_completion=False,
)
console = Console()


def _error_panel(message: str, title: str = "执行错误") -> None:
    console.print(Panel(f"[red]{message}[/red]", title=title, style="red"))


def _build_crawl_config(
    input_file: str,
    start_urls: list[str] | None,
    max_requests: int | None,
    follow_internal_only: bool | None,
    redact_pii: bool | None,
    concurrency: int | None,
) -> CrawlConfig:
    """输入文件打底，命令行参数覆盖"""
    base = CrawlConfig.from_file(input_file) if input_file else CrawlConfig()

    overrides: dict[str, Any] = {}
    if start_urls:
        overrides["start_urls"] = start_urls
    if max_requests is not None:
        overrides["max_requests_per_crawl"] = max_requests
    if follow_internal_only is not None:
        overrides["follow_internal_only"] = follow_internal_only
    if redact_pii is not None:
        overrides["redact_pii"] = redact_pii
    if concurrency is not None:
        overrides["concurrency"] = concurrency

    if not overrides:
        return base
    # 重新构造以触发校验
    return CrawlConfig(**{**base.model_dump(), **overrides})


def _build_summary_table(summary: CrawlSummary) -> Table:
    """构建爬取统计表格。"""
    table = Table(title="爬取统计")
    table.add_column("指标", style="cyan")
    table.add_column("数值", style="green")

    table.add_row("请求数", str(summary.requests))
    table.add_row("产品记录", str(summary.records))
    table.add_row("非产品页", str(summary.skipped))
    table.add_row("抽取失败", str(summary.failed_extractions))
    table.add_row("抓取失败", str(summary.failed_fetches))
    table.add_row("新入队链接", str(summary.enqueued))
    return table


@app.command("crawl")
def crawl_command(
    start_urls: list[str] | None = typer.Option(
        None,
        "--start-url",
        "-u",
        help="种子 URL（可重复）",
    ),
    input_file: str = typer.Option(
        "",
        "--input",
        "-i",
        help="爬取输入 JSON 文件（startUrls / maxRequestsPerCrawl / followInternalOnly / redactPII）",
    ),
    max_requests: int | None = typer.Option(
        None,
        "--max-requests",
        help="最大请求数（覆盖配置）",
    ),
    follow_internal_only: bool | None = typer.Option(
        None,
        "--follow-internal-only/--follow-external",
        help="是否只跟进与种子同 host 的链接",
    ),
    redact_pii: bool | None = typer.Option(
        None,
        "--redact-pii/--no-redact-pii",
        help="是否对输出字段做 PII 脱敏",
    ),
    concurrency: int | None = typer.Option(
        None,
        "--concurrency",
        "-c",
        help="并发页面数",
    ),
    headless: bool = typer.Option(
        True,
        "--headless/--no-headless",
        help="是否使用无头模式",
    ),
    output_dir: str = typer.Option(
        "",
        "--output-dir",
        "-o",
        help="输出目录（默认取配置）",
    ),
    log_file: str = typer.Option(
        "",
        "--log-file",
        help="额外写入的日志文件",
    ),
):
    """
    从种子 URL 爬取并抽取金融产品信息

    示例:
        finspider crawl -u "https://example-finance.com/loans" --max-requests 50
    """
    try:
        crawl_config = _build_crawl_config(
            input_file=input_file,
            start_urls=start_urls,
            max_requests=max_requests,
            follow_internal_only=follow_internal_only,
            redact_pii=redact_pii,
            concurrency=concurrency,
        )
    except (FinSpiderError, pydantic.ValidationError) as e:
        _error_panel(str(e), title="输入错误")
        raise typer.Exit(1)

    if log_file:
        for logger in (get_crawler_logger(), get_extractor_logger()):
            setup_file_logging(logger, log_file, level=logging.DEBUG)

    output_dir = output_dir or config.output.output_dir

    console.print(
        Panel(
            f"[bold]种子 URL:[/bold] {', '.join(crawl_config.start_urls)}\n"
            f"[bold]最大请求数:[/bold] {crawl_config.max_requests_per_crawl}\n"
            f"[bold]仅站内链接:[/bold] {crawl_config.follow_internal_only}\n"
            f"[bold]PII 脱敏:[/bold] {crawl_config.redact_pii}\n"
            f"[bold]并发数:[/bold] {crawl_config.concurrency}\n"
            f"[bold]输出目录:[/bold] {output_dir}",
            title="产品页爬虫",
            style="cyan",
        )
    )

    try:
        summary = asyncio.run(
            run_crawl(crawl_config=crawl_config, output_dir=output_dir, headless=headless)
        )
    except KeyboardInterrupt:
        console.print("\n[yellow]用户中断[/yellow]")
        raise typer.Exit(130)
    except Exception as e:  # noqa: BLE001
        _error_panel(str(e))
        raise typer.Exit(1)

    console.print(_build_summary_table(summary))
    console.print(f"\n结果已保存到: {summary.output_file}")


@app.command("extract")
def extract_command(
    html_file: Path = typer.Argument(
        ...,
        help="本地 HTML 文件",
    ),
    url: str = typer.Option(
        ...,
        "--url",
        help="页面原始 URL（用于判定与来源字段）",
    ),
    redact_pii: bool = typer.Option(
        True,
        "--redact-pii/--no-redact-pii",
        help="是否对输出字段做 PII 脱敏",
    ),
):
    """
    对本地 HTML 文件运行判定与字段抽取

    示例:
        finspider extract page.html --url "https://example-finance.com/loans/personal"
    """
    if not html_file.exists():
        _error_panel(f"HTML 文件不存在: {html_file}", title="错误")
        raise typer.Exit(1)

    assembler = RecordAssembler(ExtractionConfig(redact_pii=redact_pii))
    outcome = assembler.assemble_html(url, html_file.read_text(encoding="utf-8", errors="replace"))

    if outcome.status is OutcomeStatus.SKIPPED:
        console.print(Panel(f"非产品页，未生成记录: {outcome.reason}", title="跳过", style="yellow"))
        return
    if outcome.status is OutcomeStatus.FAILED:
        _error_panel(outcome.reason or "抽取失败", title="抽取失败")
        raise typer.Exit(1)

    console.print_json(json.dumps(outcome.record.to_dict(), ensure_ascii=False))


def main():
    """CLI 入口点

    供 pyproject.toml 中 [project.scripts] 调用。
    """
    app()


if __name__ == "__main__":
    main()
