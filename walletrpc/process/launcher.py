"""Launch and stop local wallet RPC service processes."""

from __future__ import annotations

import asyncio
import contextlib
from dataclasses import dataclass

from loguru import logger

from walletrpc.config.schema import EndpointConfig, NetworkType, WalletProcessConfig
from walletrpc.utils.exceptions import sanitize_error_message

# StreamReader line limit for the output drain
_STREAM_LIMIT = 2**16


@dataclass
class SpawnedProcess:
    """A running wallet service and the task forwarding its output to the log."""
    process: asyncio.subprocess.Process
    output_task: asyncio.Task | None = None

    @property
    def pid(self) -> int:
        return self.process.pid

    @property
    def returncode(self) -> int | None:
        return self.process.returncode


def _login(endpoint: EndpointConfig) -> str | None:
    if not endpoint.username:
        return None
    return f"{endpoint.username}:{endpoint.password or ''}"


def build_launch_args(
    process_config: WalletProcessConfig,
    daemon: EndpointConfig,
    wallet_rpc: EndpointConfig,
    port: int,
) -> list[str]:
    """Command line for a wallet RPC service bound to ``port``."""
    args = [process_config.executable_path]
    if process_config.network_type != NetworkType.MAINNET:
        args.append(f"--{process_config.network_type.value}")
    args.extend(["--daemon-address", daemon.base_uri])
    daemon_login = _login(daemon)
    if daemon_login:
        args.extend(["--daemon-login", daemon_login])
    args.extend(["--rpc-bind-port", str(port)])
    rpc_login = _login(wallet_rpc)
    if rpc_login:
        args.extend(["--rpc-login", rpc_login])
    else:
        args.append("--disable-rpc-login")
    args.extend(["--wallet-dir", process_config.wallet_dir])
    if process_config.access_control_origins:
        args.extend(["--rpc-access-control-origins", process_config.access_control_origins])
    args.extend(process_config.extra_args)
    return args


async def _forward_output(stream: asyncio.StreamReader, pid: int) -> None:
    while True:
        try:
            line = await stream.readline()
        except ValueError:
            # Line over the reader limit; the reader dropped its buffer, keep draining
            logger.debug(f"[wallet-rpc {pid}] <output line over {_STREAM_LIMIT} bytes dropped>")
            continue
        if not line:
            return
        text = line.decode("utf-8", errors="replace").rstrip()
        if text:
            logger.debug(f"[wallet-rpc {pid}] {text}")


async def spawn_wallet_rpc(args: list[str]) -> SpawnedProcess:
    """Start the service; raises OSError if the executable cannot be run."""
    proc = await asyncio.create_subprocess_exec(
        *args,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.STDOUT,
        start_new_session=True,
        limit=_STREAM_LIMIT,
    )
    logger.info(f"Started wallet RPC process (PID: {proc.pid}): {sanitize_error_message(' '.join(args))}")
    task = asyncio.create_task(_forward_output(proc.stdout, proc.pid)) if proc.stdout else None
    return SpawnedProcess(process=proc, output_task=task)


async def terminate_process(spawned: SpawnedProcess, timeout: float = 10.0) -> int | None:
    """SIGTERM, then SIGKILL after ``timeout``. Returns the exit code."""
    proc = spawned.process
    if proc.returncode is None:
        logger.info(f"Stopping wallet RPC process (PID: {proc.pid})...")
        with contextlib.suppress(ProcessLookupError):
            proc.terminate()
        try:
            await asyncio.wait_for(proc.wait(), timeout=timeout)
        except asyncio.TimeoutError:
            logger.warning(f"Wallet RPC process {proc.pid} did not stop gracefully, killing...")
            with contextlib.suppress(ProcessLookupError):
                proc.kill()
            await proc.wait()
        logger.info(f"Wallet RPC process {proc.pid} stopped (exit code {proc.returncode})")
    task = spawned.output_task
    if task is not None and not task.cancelled():
        # wait_for cancels the drain if a grandchild keeps the pipe open
        try:
            await asyncio.wait_for(task, timeout=1.0)
        except asyncio.TimeoutError:
            pass
        except Exception as e:
            logger.warning(f"Output drain for wallet RPC process {proc.pid} failed: {e!r}")
    return proc.returncode
