#!/usr/bin/env python3
"""
Demo script for the siteterm terminal.

This script walks through the commands a visitor would try, first with the
bundled sample posts and then with the small site under examples/site.
"""

import os
import sys

from siteterm import ContentIndex, TerminalConfig, TerminalSession

EXAMPLE_SITE = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'examples', 'site')


def run_demo_commands(session: TerminalSession):
    """Run a series of demo commands."""
    print("=" * 60)
    print("Site Terminal Demo")
    print("=" * 60)

    demo_commands = [
        ("# Getting around", None),
        ("help", "List the commands"),
        ("ls", "Top-level sections"),
        ("cd notes", "Enter the notes section"),
        ("ls", "Categories come from the posts"),
        ("cd web-security", "Enter a category"),
        ("ls", "Post titles in display order"),
        ("pwd", "Where are we?"),
        ("cd ..", "Up one level"),
        ("cd /nowhere", "Bad targets leave the path alone"),

        ("# Reading", None),
        ("cat bio.txt", "A virtual file"),
        ("cat", "Missing operand"),
        ("notes", "Summary of every category"),

        ("# Everything else", None),
        ("echo hello world", "Echo"),
        ("theme matrix", "Any theme name is accepted"),
        ("date", "Wall clock"),
        ("foobar", "Unknown command"),
    ]

    for cmd, description in demo_commands:
        if cmd.startswith('#'):
            # Section header
            print(f"\n{cmd}")
            print("-" * 40)
            continue

        if description:
            print(f"\n[{description}]")

        print(f"{session.get_prompt()} {cmd}")
        output = session.execute_command(cmd)
        if output:
            for line in output.split('\n'):
                print(f"  {line}")

    print("\n" + "=" * 60)
    print("Demo completed!")
    print("=" * 60)


def main():
    """Main demo entry point."""
    mode = sys.argv[1] if len(sys.argv) > 1 else 'commands'

    if mode == 'site':
        content = ContentIndex.from_directory(EXAMPLE_SITE)
    else:
        content = ContentIndex.sample()

    if mode == 'interactive':
        session = TerminalSession(config=TerminalConfig(profile='classic'), content=content)
        session.run_interactive()
    elif mode in ('commands', 'site'):
        run_demo_commands(TerminalSession(content=content))
    else:
        print(f"Unknown mode: {mode}")
        print("Available modes: commands, site, interactive")


if __name__ == '__main__':
    main()
