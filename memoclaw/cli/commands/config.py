"""Local setup commands for MemoClaw CLI - init and config."""

import json
import logging
import os

import yaml

from memoclaw import auth, colors, output
from memoclaw.cli.commands.helpers import positional
from memoclaw.config import (
    DEFAULT_API_URL,
    DEFAULT_TIMEOUT,
    ensure_config_dir,
    get_api_url,
    get_config_file_path,
    get_persisted_config_path,
    get_private_key,
    mask_secret,
)
from memoclaw.errors import AuthError, ConfigError, ValidationError

logger = logging.getLogger(__name__)


def cmd_init(args):
    """Generate a wallet and persist it to ``config.json``."""
    config_path = get_persisted_config_path()

    if config_path.exists() and not args.has("force"):
        try:
            existing = json.loads(config_path.read_text())
        except (json.JSONDecodeError, OSError):
            existing = {}
        output.warn(f"Config already exists at {colors.cyan(str(config_path))}")
        output.write_error(f"  Wallet: {colors.dim(existing.get('address') or '(unknown)')}")
        output.write_error(f"  Use {colors.bold('--force')} to overwrite.")
        raise ConfigError(f"Config already exists at {config_path}")

    private_key, address = auth.generate_wallet()
    api_url = args.value("url") or DEFAULT_API_URL

    ensure_config_dir()
    config = {"privateKey": private_key, "address": address, "url": api_url}
    with open(config_path, "w") as f:
        json.dump(config, f, indent=2)
    # Owner read/write only: the file holds the wallet key
    config_path.chmod(0o600)
    auth.reset_account()

    if output.get_config().json_mode:
        output.render({"address": address, "url": api_url, "configPath": str(config_path)})
        return

    output.write("")
    output.write(f"{colors.green('✓')} {colors.bold('MemoClaw initialized!')}")
    output.write("")
    output.write(f"  {colors.bold('Wallet:')}  {colors.cyan(address)}")
    output.write(f"  {colors.bold('API:')}     {colors.dim(api_url)}")
    output.write(f"  {colors.bold('Config:')}  {colors.dim(str(config_path))}")
    output.write("")
    output.write("  Your wallet is your identity. No signup needed.")
    output.write(f"  You get {colors.bold('100 free API calls')}, then x402 micropayments.")
    output.write("")
    output.write(colors.dim('  Try: memoclaw store "Hello, MemoClaw!"'))


def _config_init():
    ensure_config_dir()
    timeout = os.environ.get("MEMOCLAW_TIMEOUT")
    sample = {
        "url": os.environ.get("MEMOCLAW_URL") or DEFAULT_API_URL,
        "namespace": os.environ.get("MEMOCLAW_NAMESPACE") or "",
        "timeout": int(timeout) if timeout and timeout.isdigit() else DEFAULT_TIMEOUT,
    }
    path = get_config_file_path()
    path.write_text(yaml.safe_dump(sample, indent=2, sort_keys=False))
    output.success(f"Config file created at {colors.cyan(str(path))}")
    output.write(colors.dim("Set the wallet key via MEMOCLAW_PRIVATE_KEY, not this file"))


def _config_show():
    private_key = get_private_key()
    settings = {
        "MEMOCLAW_URL": get_api_url(),
        "MEMOCLAW_PRIVATE_KEY": mask_secret(private_key),
        "NO_COLOR": os.environ.get("NO_COLOR") or "(not set)",
        "DEBUG": os.environ.get("DEBUG") or "(not set)",
    }
    if output.get_config().json_mode:
        output.render(settings)
        return
    output.write(colors.bold("MemoClaw Configuration"))
    output.write(colors.dim("─" * 50))
    for key, value in settings.items():
        shown = colors.dim(value) if "not set" in value else value
        output.write(f"  {colors.cyan(key.ljust(24))} {shown}")
    output.write("")
    output.write(colors.dim("Set via environment variables or ~/.memoclaw/config"))


def config_issues(private_key):
    """Problems with the configured wallet key, if any."""
    if not private_key:
        return ["MEMOCLAW_PRIVATE_KEY is not set"]
    if not private_key.startswith("0x"):
        return ["MEMOCLAW_PRIVATE_KEY should start with 0x"]
    if len(private_key) != 66:
        return [f"MEMOCLAW_PRIVATE_KEY has wrong length ({len(private_key)}, expected 66)"]
    return []


def _config_check():
    issues = config_issues(get_private_key())
    if output.get_config().json_mode:
        output.render({"valid": not issues, "issues": issues})
        return
    if issues:
        for issue in issues:
            output.write(f"{colors.red('✗')} {issue}")
        return
    output.success("Configuration looks good!")
    try:
        output.info(f"Wallet address: {auth.get_account().address}")
    except AuthError as e:
        logger.debug(f"Could not derive wallet address: {e}")


def cmd_config(args):
    """Show, check or create client configuration."""
    action = positional(args, 0)
    if action == "init":
        _config_init()
    elif action == "path":
        output.write(str(get_config_file_path()))
    elif action in (None, "show"):
        _config_show()
    elif action == "check":
        _config_check()
    else:
        raise ValidationError("Usage: config [show|check|init|path]")
