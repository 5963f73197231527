#!/usr/bin/env python3
"""Start the Agent console under uvicorn, honouring PORT / AGENT_PORT."""

import os
import subprocess
import sys

# PORT wins (set by PaaS hosts), then AGENT_PORT, then the console default
port = os.environ.get("PORT") or os.environ.get("AGENT_PORT") or "4000"

try:
    port_int = int(port)
except ValueError:
    print(f"Warning: Invalid port value '{port}', using default 4000", file=sys.stderr)
    port_int = 4000

src_path = os.path.abspath("src")
if not os.path.isdir(src_path):
    print(f"Warning: src directory not found at {src_path}", file=sys.stderr)
    src_path = os.getcwd()

pythonpath = os.environ.get("PYTHONPATH", "")
os.environ["PYTHONPATH"] = f"{src_path}{os.pathsep}{pythonpath}" if pythonpath else src_path

cmd = [
    sys.executable,
    "-m",
    "uvicorn",
    "locker_agent.main:app",
    "--host",
    "0.0.0.0",
    "--port",
    str(port_int),
    "--proxy-headers",
    "--forwarded-allow-ips", "*",
]

print(f"Starting Agent console on port {port_int}...", file=sys.stderr)
print(f"PYTHONPATH={os.environ['PYTHONPATH']}", file=sys.stderr)
print(f"Backend API base: {os.environ.get('AGENT_API_BASE_URL', 'http://127.0.0.1:3000 (default)')}", file=sys.stderr)

sys.path.insert(0, src_path)
try:
    import locker_agent.main  # noqa: F401
    print("✅ Successfully imported locker_agent.main", file=sys.stderr)
except Exception as e:
    print(f"❌ Failed to import locker_agent.main ({type(e).__name__}): {e}", file=sys.stderr)
    import traceback
    traceback.print_exc(file=sys.stderr)
    sys.exit(1)

print("🚀 Starting uvicorn server...", file=sys.stderr)
try:
    sys.exit(subprocess.call(cmd))
except KeyboardInterrupt:
    print("⚠️ Server interrupted by user", file=sys.stderr)
    sys.exit(0)
