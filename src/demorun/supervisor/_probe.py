"""TCP readiness probing.

Readiness means the service port accepts a TCP connection. Every probe
and every wait here is bounded by an explicit timeout.
"""

import anyio


async def is_port_open(host: str, port: int, *, timeout: float = 1.0) -> bool:
    """Check whether a TCP port accepts connections.

    Args:
        host: Host to connect to.
        port: Port to connect to.
        timeout: Seconds allowed for the connection attempt.

    Returns:
        True if the connection succeeded within the timeout.
    """
    with anyio.move_on_after(timeout):
        try:
            stream = await anyio.connect_tcp(host, port)
        except OSError:
            return False
        await stream.aclose()
        return True
    return False


async def wait_for_port(  # noqa: PLR0913
    host: str,
    port: int,
    *,
    timeout: float,
    interval: float = 1.0,
    connect_timeout: float = 1.0,
    exited: anyio.Event | None = None,
) -> bool:
    """Poll a TCP port until it opens, the deadline passes, or a process exits.

    The whole wait runs under a single deadline, so it never exceeds
    `timeout` seconds regardless of how long individual probes take.

    Args:
        host: Host to probe.
        port: Port to probe.
        timeout: Overall deadline in seconds.
        interval: Seconds between probes.
        connect_timeout: Seconds allowed for each probe.
        exited: Event set when the owning process exits; ends the wait early.

    Returns:
        True if the port became reachable, False otherwise.
    """
    with anyio.move_on_after(timeout):
        while True:
            if await is_port_open(host, port, timeout=min(connect_timeout, interval)):
                return True
            if exited is not None and exited.is_set():
                return False

            # Sleep for the interval, waking early if the process exits
            with anyio.move_on_after(interval):
                if exited is not None:
                    await exited.wait()
                else:
                    await anyio.sleep(interval)
    return False
