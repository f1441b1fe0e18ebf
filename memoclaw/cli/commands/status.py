"""Account and overview commands for MemoClaw CLI - status, stats, count, suggested."""

import logging

from memoclaw import auth, client, colors, output
from memoclaw.cli.commands.helpers import fixed, tags_of
from memoclaw.config import get_api_url

logger = logging.getLogger(__name__)

CATEGORY_COLORS = {
    "STALE": colors.red,
    "FRESH": colors.green,
    "HOT": colors.yellow,
    "DECAYING": colors.magenta,
}


def _quota_bar(remaining: int, total: int, width: int = 20) -> str:
    fraction = remaining / total if total else 0
    filled = max(0, min(width, int(fraction * width + 0.5)))
    return colors.green("█" * filled) + colors.dim("░" * (width - filled))


def cmd_status(args):
    """Show the wallet and remaining free-tier calls."""
    data = client.require_free_tier_status()
    if output.get_config().json_mode:
        output.render(data)
        return

    remaining = data.get("free_tier_remaining") or 0
    total = data.get("free_tier_total") or 100
    pct = int(remaining / total * 100 + 0.5) if total else 0
    output.write(f"{colors.bold('Wallet:')}     {data.get('wallet', '')}")
    output.write(f"{colors.bold('Free tier:')}  {remaining}/{total} calls remaining")
    output.write(f"            {_quota_bar(remaining, total)} {pct}%")
    if remaining == 0:
        output.write(
            colors.yellow("→ Next calls will use x402 payment (pay-per-use USDC on Base)")
        )


def _total_memories(args):
    params = {"limit": 1}
    if args.value("namespace"):
        params["namespace"] = args.value("namespace")
    result = client.request("GET", "/v1/memories", params=params)
    total = result.get("total") if isinstance(result, dict) else None
    return "?" if total is None else total


def cmd_stats(args):
    """Summarise memory count, API endpoint and quota."""
    total = _total_memories(args)
    tier = client.free_tier_status() or {}
    api_url = get_api_url()
    wallet = tier.get("wallet") or auth.get_account().address

    if output.get_config().json_mode:
        output.render(
            {
                "total_memories": total,
                "api_url": api_url,
                "wallet": wallet,
                "free_tier_remaining": tier.get("free_tier_remaining"),
                "free_tier_total": tier.get("free_tier_total"),
            }
        )
        return

    output.write(colors.bold("MemoClaw Stats"))
    output.write(colors.dim("─" * 40))
    output.write(f"Memories:        {colors.cyan(str(total))}")
    output.write(f"API:             {colors.dim(api_url)}")
    output.write(f"Wallet:          {colors.dim(wallet)}")
    if tier.get("free_tier_remaining") is not None:
        output.write(
            f"Free calls left: {colors.cyan(str(tier['free_tier_remaining']))}"
            f"/{tier.get('free_tier_total')}"
        )
    if args.value("namespace"):
        output.write(f"Namespace:       {colors.cyan(args.value('namespace'))}")


def cmd_count(args):
    """Print the number of stored memories."""
    total = _total_memories(args)
    if output.get_config().json_mode:
        output.render({"count": total, "namespace": args.value("namespace")})
    else:
        output.write(str(total))


def cmd_suggested(args):
    """Show memories suggested for review (stale, decaying, hot)."""
    params = {}
    if args.value("limit") is not None:
        params["limit"] = args.value("limit")
    if args.value("namespace"):
        params["namespace"] = args.value("namespace")
    if args.value("category"):
        params["category"] = args.value("category")

    result = client.request("GET", "/v1/suggested", params=params)
    if output.get_config().json_mode:
        output.render(result)
        return

    categories = result.get("categories")
    if categories:
        summary = "  ".join(f"{colors.bold(name)}={count}" for name, count in categories.items())
        output.write(f"Categories: {summary}")
        output.write(colors.dim("─" * 60))

    suggestions = result.get("suggested") or []
    if not suggestions:
        output.write(colors.dim("No suggested memories."))
        return

    for mem in suggestions:
        category = (mem.get("category") or "???").upper()
        paint = CATEGORY_COLORS.get(category, colors.gray)
        content = mem.get("content") or ""
        text = content[:100] + "…" if len(content) > 100 else content
        score = fixed(mem.get("review_score"), 2) or "?"
        output.write(f"{paint(f'[{category}]')} {colors.dim(f'({score})')} {text}")
        if tags_of(mem):
            output.write(f"  {colors.dim('tags: ' + ', '.join(tags_of(mem)))}")
