#!/usr/bin/env python3
"""
CacheGuard CLI Interface

Command-line interface for inspecting the memory of the current process
with the CacheGuard memory monitor.
"""

import argparse
import json
import sys
import time

from . import __version__
from .config import CacheGuardConfig
from .monitor import MemoryMonitor


def create_parser():
    """Create the argument parser for CacheGuard CLI."""
    parser = argparse.ArgumentParser(
        prog='cacheguard',
        description='CacheGuard - Adaptive Cache and Memory Monitor',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  cacheguard status --json
  cacheguard report --samples 10 --interval 1 --output report.json --format json
  cacheguard leaks --samples 5 --interval 2
  cacheguard gc
  cacheguard config
        """
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # Status command
    status_parser = subparsers.add_parser('status', help='Show current memory status')
    status_parser.add_argument('--json', action='store_true',
                               help='Output in JSON format')

    # Report command
    report_parser = subparsers.add_parser('report', help='Sample memory and print a report')
    report_parser.add_argument('--samples', '-n', type=int, default=10,
                               help='Number of samples to take (default: 10)')
    report_parser.add_argument('--interval', '-i', type=float, default=1.0,
                               help='Seconds between samples (default: 1)')
    report_parser.add_argument('--format', choices=['json', 'text'], default='text',
                               help='Output format (default: text)')
    report_parser.add_argument('--output', '-o', type=str,
                               help='Output file for report')

    # Leaks command
    leaks_parser = subparsers.add_parser('leaks', help='Sample memory and run leak detection')
    leaks_parser.add_argument('--samples', '-n', type=int, default=5,
                              help='Number of samples to take (default: 5)')
    leaks_parser.add_argument('--interval', '-i', type=float, default=1.0,
                              help='Seconds between samples (default: 1)')

    # GC command
    subparsers.add_parser('gc', help='Run a manual garbage collection')

    # Config command
    subparsers.add_parser('config', help='Show the effective configuration')

    return parser


def create_monitor():
    """Memory monitor configured from CACHEGUARD_* environment variables."""
    return MemoryMonitor(CacheGuardConfig.from_env().memory)


def collect_samples(monitor, samples, interval):
    """Run ``samples`` monitor ticks, ``interval`` seconds apart."""
    for i in range(max(0, samples)):
        if i and interval > 0:
            time.sleep(interval)
        monitor.sample()


def format_status_text(stats):
    """Format detailed memory stats for text output."""
    current = stats.current
    lines = []
    lines.append("CacheGuard Memory Status")
    lines.append("=" * 24)
    lines.append(f"Status: {stats.status.level.upper()} - {stats.status.message}")
    lines.append(f"Heap used: {current.heap_used:.2f} MB")
    lines.append(f"Heap total: {current.heap_total:.2f} MB")
    lines.append(f"RSS: {current.rss:.2f} MB")
    lines.append(f"External: {current.external:.2f} MB")
    lines.append(f"Traced: {current.array_buffers:.2f} MB")
    lines.append("")

    uptime_hours = stats.uptime_s / 3600
    if uptime_hours < 1:
        uptime_str = f"{stats.uptime_s:.0f}s"
    elif uptime_hours < 24:
        uptime_str = f"{uptime_hours:.1f}h"
    else:
        uptime_str = f"{uptime_hours / 24:.1f}d"
    lines.append(f"Uptime: {uptime_str}")
    lines.append(f"Process: {stats.pid} on {stats.platform}, Python {stats.python_version}")
    return "\n".join(lines)


def format_leaks_text(signal, samples):
    lines = [f"Leak detection over {samples} samples"]
    if signal.detected:
        lines.append(f"LEAK SUSPECTED ({signal.confidence} confidence)")
        lines.append(f"   Growth: {signal.growth_mb:.2f} MB ({signal.growth_rate_percent:.2f}%)")
        lines.append(f"   {signal.recommendation}")
    else:
        lines.append(f"No leak detected: {signal.reason}")
    return "\n".join(lines)


def cmd_status(args):
    """Handle status command."""
    try:
        stats = create_monitor().get_detailed_stats()

        if args.json:
            print(json.dumps(stats.to_dict(), indent=2))
        else:
            print(format_status_text(stats))

    except Exception as e:
        print(f"Failed to get status: {e}")
        return 1

    return 0


def cmd_report(args):
    """Handle report command."""
    try:
        monitor = create_monitor()
        collect_samples(monitor, args.samples, args.interval)
        report = monitor.generate_report()

        output = report.to_json() if args.format == 'json' else report.summary()

        if args.output:
            with open(args.output, 'w') as f:
                f.write(output)
            print(f"Report saved to {args.output}")
        else:
            print(output)

    except Exception as e:
        print(f"Failed to generate report: {e}")
        return 1

    return 0


def cmd_leaks(args):
    """Handle leaks command."""
    try:
        monitor = create_monitor()
        collect_samples(monitor, args.samples, args.interval)
        print(format_leaks_text(monitor.detect_leaks(), args.samples))

    except Exception as e:
        print(f"Failed to run leak detection: {e}")
        return 1

    return 0


def cmd_gc(args):
    """Handle gc command."""
    result = create_monitor().force_gc()
    if not result.success:
        print(f"Garbage collection failed: {result.error}")
        return 1

    print("Garbage collection completed")
    print(f"   Freed: {result.freed:.2f} MB")
    print(f"   Time: {result.gc_time_ms:.2f} ms")
    print(f"   Unreachable objects: {result.collected_objects}")
    return 0


def cmd_config(args):
    """Handle config command."""
    print(json.dumps(CacheGuardConfig.from_env().to_dict(), indent=2))
    return 0


def main(argv=None):
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    # Dispatch to command handlers
    handlers = {
        'status': cmd_status,
        'report': cmd_report,
        'leaks': cmd_leaks,
        'gc': cmd_gc,
        'config': cmd_config,
    }

    handler = handlers.get(args.command)
    if handler:
        return handler(args)
    else:
        print(f"Unknown command: {args.command}")
        return 1


if __name__ == '__main__':
    sys.exit(main())
