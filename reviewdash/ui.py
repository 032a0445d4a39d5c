"""
Gradio dashboard for reviewing normalized transactions and detected patterns.

Run:
  reviewdash-ui          (or: python -m reviewdash.ui)

Set BACKEND_URL in .env; BACKEND_URL=mock: runs against the in-memory backend.
"""

import asyncio
from datetime import datetime
from typing import List, Optional

import gradio as gr

from reviewdash.config import settings
from reviewdash.models import Notification, Pattern, Transaction
from reviewdash.services.controller import DashboardController
from reviewdash.utils.log_format import configure_logging

TRANSACTION_HEADERS = [
    "ID", "Original", "Amount", "Date", "Merchant", "Category",
    "Sub-category", "Confidence", "Subscription", "Flags",
]
PATTERN_HEADERS = [
    "ID", "Type", "Merchant", "Amount", "Frequency", "Confidence",
    "Next expected", "Last occurrence", "Occurrences", "Active",
]

_controller: Optional[DashboardController] = None


def get_controller() -> DashboardController:
    """One controller per dashboard process, created on first use."""
    global _controller
    if _controller is None:
        _controller = DashboardController.from_settings(settings)
    return _controller


def _fmt_date(value: Optional[datetime]) -> str:
    return value.strftime("%Y-%m-%d") if value else "—"


def _fmt_confidence(value: float) -> str:
    return f"{value * 100:.0f}%"


def transaction_rows(transactions: List[Transaction]) -> List[list]:
    rows = []
    for tx in transactions:
        n = tx.normalized
        rows.append([
            tx.id,
            tx.original or "—",
            f"{tx.amount:.2f}",
            _fmt_date(tx.date),
            n.merchant if n else "—",
            n.category if n else "—",
            n.sub_category if n else "—",
            _fmt_confidence(n.confidence) if n else "—",
            ("Yes" if n.is_subscription else "No") if n else "—",
            ", ".join(sorted(n.flags)) if n else "",
        ])
    return rows


def pattern_rows(patterns: List[Pattern]) -> List[list]:
    return [
        [
            p.id,
            p.type,
            p.merchant,
            f"{p.amount:.2f}",
            p.frequency,
            _fmt_confidence(p.confidence),
            _fmt_date(p.next_expected),
            _fmt_date(p.last_occurrence),
            p.occurrence_count,
            "Yes" if p.is_active else "No",
        ]
        for p in patterns
    ]


def notification_markdown(notification: Optional[Notification]) -> str:
    if notification is None:
        return ""
    icon = "✅" if notification.kind == "success" else "❌"
    return f"{icon} **{notification.message}**"


def render_view():
    """Project the controller state onto every output component."""
    ctl = get_controller()
    controls = ctl.controls()
    pending = ", ".join(controls.pending_ids)
    return (
        notification_markdown(ctl.notification),
        "_Loading transactions..._" if controls.is_loading else "",
        gr.update(
            label="Uploading..." if ctl.busy.uploading else "Upload CSV",
            interactive=not controls.upload_disabled,
        ),
        gr.update(
            value="Analyzing..." if controls.analyze_disabled else "Run Merchant Analysis",
            interactive=not controls.analyze_disabled,
        ),
        {"headers": TRANSACTION_HEADERS, "data": transaction_rows(ctl.transactions)},
        gr.update(interactive=not controls.delete_all_transactions_disabled),
        f"Deleting: {pending}" if pending else "",
        gr.update(
            value="Detecting..." if controls.detect_disabled else "Run Pattern Detection",
            interactive=not controls.detect_disabled,
        ),
        {"headers": PATTERN_HEADERS, "data": pattern_rows(ctl.patterns)},
        gr.update(interactive=not controls.delete_all_patterns_disabled),
    )


async def _run(coro):
    """Show the busy state while `coro` runs, then the settled state."""
    task = asyncio.ensure_future(coro)
    await asyncio.sleep(0)
    yield render_view()
    await task
    yield render_view()


async def on_mount():
    async for view in _run(get_controller().mount()):
        yield view


async def on_select_merchant():
    async for view in _run(get_controller().select_tab("merchant")):
        yield view


async def on_select_pattern():
    async for view in _run(get_controller().select_tab("pattern")):
        yield view


async def on_upload(path):
    async for view in _run(get_controller().upload(path)):
        yield view


async def on_analyze():
    async for view in _run(get_controller().analyze_merchants()):
        yield view


async def on_detect():
    async for view in _run(get_controller().detect_patterns()):
        yield view


async def on_delete_one(transaction_id):
    transaction_id = (transaction_id or "").strip()
    if not transaction_id:
        yield render_view()
        return
    async for view in _run(get_controller().delete_transaction(transaction_id)):
        yield view


async def on_delete_all_transactions():
    async for view in _run(get_controller().delete_all("merchant")):
        yield view


async def on_delete_all_patterns():
    async for view in _run(get_controller().delete_all("pattern")):
        yield view


def build_demo() -> gr.Blocks:
    with gr.Blocks(
        title=settings.app_name,
        theme=gr.themes.Base(primary_hue="blue", neutral_hue="slate"),
    ) as demo:
        with gr.Row():
            gr.Markdown(f"# {settings.app_name}")
            upload_btn = gr.UploadButton("Upload CSV", file_types=[".csv"], variant="primary")
        notice = gr.Markdown()
        loading = gr.Markdown()

        with gr.Tabs():
            # --- Tab 1: Merchant analysis ---
            with gr.Tab("Merchant Analysis") as merchant_tab:
                gr.Markdown("Analyze and normalize merchant names and categories.")
                with gr.Row():
                    analyze_btn = gr.Button("Run Merchant Analysis", variant="primary")
                    delete_tx_btn = gr.Button("Delete All Transactions", variant="stop", interactive=False)
                tx_table = gr.Dataframe(headers=TRANSACTION_HEADERS, interactive=False, wrap=True)
                with gr.Row():
                    delete_id = gr.Textbox(label="Transaction ID", scale=3)
                    delete_one_btn = gr.Button("Delete Transaction", variant="secondary", scale=1)
                pending_md = gr.Markdown()

            # --- Tab 2: Pattern detection ---
            with gr.Tab("Pattern Detection") as pattern_tab:
                gr.Markdown("Detect recurring payments and subscription patterns.")
                with gr.Row():
                    detect_btn = gr.Button("Run Pattern Detection", variant="primary")
                    delete_pat_btn = gr.Button("Delete All Patterns", variant="stop", interactive=False)
                pat_table = gr.Dataframe(headers=PATTERN_HEADERS, interactive=False, wrap=True)

        outputs = [
            notice, loading, upload_btn,
            analyze_btn, tx_table, delete_tx_btn, pending_md,
            detect_btn, pat_table, delete_pat_btn,
        ]
        # Handlers may overlap; the controller tracks each action itself.
        events = dict(outputs=outputs, concurrency_limit=None)

        demo.load(fn=on_mount, **events)
        merchant_tab.select(fn=on_select_merchant, **events)
        pattern_tab.select(fn=on_select_pattern, **events)
        upload_btn.upload(fn=on_upload, inputs=[upload_btn], **events)
        analyze_btn.click(fn=on_analyze, **events)
        detect_btn.click(fn=on_detect, **events)
        delete_one_btn.click(fn=on_delete_one, inputs=[delete_id], **events)
        delete_tx_btn.click(fn=on_delete_all_transactions, **events)
        delete_pat_btn.click(fn=on_delete_all_patterns, **events)

        # Re-render so notification auto-dismiss shows up without user input
        gr.Timer(1.0).tick(fn=render_view, outputs=outputs, show_progress="hidden")

    return demo


def main() -> None:
    configure_logging(config=settings)
    demo = build_demo()
    demo.queue(default_concurrency_limit=None)
    demo.launch(server_name=settings.ui_host, server_port=settings.ui_port)


if __name__ == "__main__":
    main()
