#!/usr/bin/env python3
"""
Startup script for the CareConnect backend.
This script can start the API server, check the environment, or run the client.
"""

import os
import sys
import asyncio
import argparse
import subprocess
from pathlib import Path


def run_api(host, port, reload=True):
    """Run the FastAPI server"""
    print(f"🚀 Starting FastAPI server on http://{host}:{port} ...")
    cmd = [sys.executable, "-u", "-m", "uvicorn", "api.main:app", "--host", host, "--port", str(port)]
    if reload:
        cmd.append("--reload")
    env = os.environ.copy()
    env["PYTHONUNBUFFERED"] = "1"
    return subprocess.Popen(
        cmd,
        cwd=Path(__file__).parent,
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        text=True,
        bufsize=1,
        env=env
    )


def check_dependencies():
    """Check if required dependencies are installed"""
    try:
        import fastapi
        import motor
        import httpx
        import dateparser
        print("✅ Dependencies installed")
        return True
    except ImportError as e:
        print(f"❌ Missing dependency: {e}")
        print("💡 Run: pip install -e .")
        return False


def check_database():
    """Check that MongoDB answers a ping"""
    from core.database import DatabaseManager, StorageError

    async def _ping():
        manager = DatabaseManager()
        try:
            await manager.connect()
            return True
        except StorageError as e:
            print(f"❌ {e}")
            return False
        finally:
            await manager.close()

    ok = asyncio.run(_ping())
    if ok:
        print("✅ MongoDB reachable")
    else:
        print("💡 Check MONGODB_URI in your .env.local file")
    return ok


def main():
    from core import config

    parser = argparse.ArgumentParser(description="CareConnect Startup Script")
    parser.add_argument(
        "command",
        choices=["api", "check", "client"],
        help="What to run: api server, check environment, or the command-line client"
    )
    parser.add_argument("--host", default=config.API_HOST)
    parser.add_argument("--port", type=int, default=config.API_PORT)
    parser.add_argument("--no-reload", action="store_true", help="Disable auto-reload")
    parser.add_argument("client_args", nargs=argparse.REMAINDER, help="Arguments for the client")

    args = parser.parse_args()

    if args.command == "check":
        print("🔍 Checking system requirements...")
        deps_ok = check_dependencies()
        db_ok = deps_ok and check_database()

        if deps_ok and db_ok:
            print("✅ System ready!")
            return 0
        else:
            print("❌ System not ready")
            return 1

    if args.command == "client":
        from client.main import main as client_main
        return client_main(args.client_args)

    if not check_dependencies():
        return 1

    process = run_api(args.host, args.port, reload=not args.no_reload)
    try:
        print("✅ API server starting... (logs below)\n")
        # Stream output in real-time
        for line in iter(process.stdout.readline, ''):
            if not line:
                break
            print(line.rstrip())

        # Wait for process to complete
        return_code = process.wait()
        if return_code != 0:
            print(f"\n❌ API server exited with code {return_code}")
            return 1
    except KeyboardInterrupt:
        print("\n🛑 Stopping API server...")
        process.terminate()
        try:
            process.wait(timeout=5)
        except subprocess.TimeoutExpired:
            process.kill()
            process.wait()

    return 0


if __name__ == "__main__":
    sys.exit(main())
