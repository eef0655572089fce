"""Rescue shell network commands."""

from __future__ import annotations

from typing import Protocol

from .pxe import NetworkInfo


class EchoClient(Protocol):
    def icmp_echo(self, host: str) -> int: ...


def ping(client: EchoClient, host: str) -> str:
    """Ping ``host``; raises ``ConnectionError`` when no reply arrives."""
    try:
        rtt = client.icmp_echo(host)
    except OSError as err:
        raise ConnectionError(f"No reply from {host}") from err
    return f"Reply from {host}: time={rtt}ms\n"


def ifconfig(info: NetworkInfo | None) -> str:
    """Describe the network interface configuration."""
    if info is None:
        raise ValueError("No network info available")
    return (
        f"eth0: {info.client_ip}\n"
        f"  netmask: {info.subnet_mask}\n"
        f"  gateway: {info.router_ip}\n"
        f"  dns: {info.dns_server}\n"
        f"  tftp: {info.tftp_server}\n"
        f"  bootfile: {info.boot_file}\n"
        f"  domain: {info.domain_name}\n"
    )