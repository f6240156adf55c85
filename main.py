#!/usr/bin/env python3

"""
starshell - A minimal interactive shell with a tiny package manager
for prebuilt binaries published on GitHub releases

Usage:
  starshell [options]

Options:
  --config FILE       Configuration file (default: starshell.yaml)
  --install REPO      Install the latest release of REPO (e.g. junegunn/fzf)
  --list              List installed stars
  --uninstall REPO    Uninstall a star and delete its file
  --update REPO       Reinstall the latest release of an installed star
  --orphans           Show files in ./stars without a manifest entry
  --history           Show the history of package operations
  --init              Initialize a default config file in ~/.config/starshell/
  --help              Show this help message

Without options the interactive shell starts. Inside it, 'star install
user/repo', 'star list', 'star uninstall user/repo' and 'star update
user/repo' manage packages; 'exit' quits.
"""

from starshell import run_cli

if __name__ == "__main__":
    run_cli()
