#!/usr/bin/env python3
"""
Local Project Setup
Starts a local Supabase stack, writes its credentials to .env and applies
the database migrations
"""

import argparse
import logging
import re
import shutil
import subprocess
import sys
from pathlib import Path
from typing import Dict, List, Optional, Sequence

logger = logging.getLogger("setup")

TOTAL_STEPS = 6

# "supabase status" output lines, e.g. "API URL: http://127.0.0.1:54321"
STATUS_PATTERNS = {
    "SUPABASE_URL": re.compile(r"^\s*API URL:\s*(\S+)", re.MULTILINE),
    "SUPABASE_ANON_KEY": re.compile(r"^\s*anon key:\s*(\S+)", re.MULTILINE | re.IGNORECASE),
    "SUPABASE_SERVICE_ROLE_KEY": re.compile(r"^\s*service_role key:\s*(\S+)", re.MULTILINE | re.IGNORECASE),
}


class SetupError(Exception):
    """A setup step failed"""


def supabase_command() -> Optional[List[str]]:
    """Find the Supabase CLI, preferring a global install over npx"""
    if shutil.which("supabase"):
        return ["supabase"]
    if shutil.which("npx"):
        return ["npx", "supabase"]
    return None


def run(command: Sequence[str], capture: bool = True) -> subprocess.CompletedProcess:
    """Run a command without raising on a non-zero exit"""
    logger.debug(f"Running: {' '.join(command)}")
    return subprocess.run(
        list(command),
        capture_output=capture,
        text=True,
        check=False
    )


def check_prerequisites() -> List[str]:
    """
    Check the tools the local stack needs

    Returns:
        list: Base command for the Supabase CLI

    Raises:
        SetupError: If Docker or the Supabase CLI is missing
    """
    missing = []

    if shutil.which("docker"):
        logger.info("✅ Docker is installed")
    else:
        logger.error("❌ Docker is not installed (https://docs.docker.com/get-docker/)")
        missing.append("docker")

    cli = supabase_command()
    if cli and run(cli + ["--version"]).returncode == 0:
        logger.info(f"✅ Supabase CLI is available ({' '.join(cli)})")
    else:
        logger.error("❌ Supabase CLI is not available (npm install -g supabase)")
        missing.append("supabase")

    if missing:
        raise SetupError(f"Missing prerequisites: {', '.join(missing)}")
    return cli


def parse_status(output: str) -> Dict[str, str]:
    """
    Extract the API URL and keys from "supabase status" output

    Args:
        output: Text printed by the CLI

    Returns:
        dict: Environment variable name -> value for every value found
    """
    values = {}
    for name, pattern in STATUS_PATTERNS.items():
        match = pattern.search(output)
        if match:
            values[name] = match.group(1)
    return values


def update_env_file(env_path: Path, values: Dict[str, str], example_path: Optional[Path] = None) -> str:
    """
    Replace or append variables in an env file

    Starts from the existing file, or the example file when the env file
    does not exist yet.

    Returns:
        str: The written content
    """
    if env_path.exists():
        content = env_path.read_text()
    elif example_path is not None and example_path.exists():
        content = example_path.read_text()
    else:
        content = ""

    for name, value in values.items():
        line = f"{name}={value}"
        pattern = re.compile(rf"^{re.escape(name)}=.*$", re.MULTILINE)
        if pattern.search(content):
            content = pattern.sub(lambda _: line, content)
        else:
            if content and not content.endswith("\n"):
                content += "\n"
            content += line + "\n"

    if not content.endswith("\n"):
        content += "\n"

    env_path.write_text(content)
    return content


def is_running(cli: List[str]) -> bool:
    return run(cli + ["status"]).returncode == 0


def log_step(step: int, message: str) -> None:
    logger.info(f"[{step}/{TOTAL_STEPS}] {message}")


def setup(project_dir: Path, skip_migrations: bool = False) -> Dict[str, str]:
    """Run every setup step; returns the credentials written to .env"""
    log_step(1, "Checking prerequisites...")
    cli = check_prerequisites()

    log_step(2, "Checking Supabase status...")
    running = is_running(cli)
    logger.info("Supabase is already running" if running else "Supabase is not running (will start)")

    log_step(3, "Starting Supabase...")
    if running:
        logger.info("Skipped - already running")
    else:
        logger.info("This may take a few minutes on first run...")
        if run(cli + ["start"], capture=False).returncode != 0:
            raise SetupError(
                "Failed to start Supabase. Make sure Docker is running, "
                "then try 'supabase stop' and run this script again"
            )
        logger.info("✅ Supabase started")

    log_step(4, "Extracting Supabase credentials...")
    status = run(cli + ["status"])
    credentials = parse_status(status.stdout or "")
    if "SUPABASE_URL" not in credentials or "SUPABASE_ANON_KEY" not in credentials:
        raise SetupError("Failed to extract credentials from 'supabase status'")
    logger.info(f"✅ API URL: {credentials['SUPABASE_URL']}")

    log_step(5, "Configuring environment variables...")
    update_env_file(project_dir / ".env", credentials, project_dir / ".env.example")
    logger.info("✅ Environment variables written to .env")

    log_step(6, "Running database migrations...")
    if skip_migrations:
        logger.info("Skipped")
    elif run(cli + ["db", "reset"], capture=False).returncode != 0:
        # The stack is usable without the reset; report and carry on
        logger.warning("⚠️ Database migration failed - run 'supabase db reset' manually")
    else:
        logger.info("✅ Database migrations completed")

    return credentials


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Set up a local Supabase stack for the account service")
    parser.add_argument("--project-dir", type=Path, default=Path.cwd(), help="Directory holding supabase/ and .env")
    parser.add_argument("--skip-migrations", action="store_true", help="Do not run 'supabase db reset'")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every command")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(message)s"
    )

    try:
        setup(args.project_dir, skip_migrations=args.skip_migrations)
    except SetupError as e:
        logger.error(f"❌ Setup failed: {e}")
        return 1

    logger.info("Setup complete. Start the service with: uvicorn account_service.main:app --reload")
    logger.info("Supabase Studio: http://localhost:54323")
    return 0


if __name__ == "__main__":
    sys.exit(main())
