from rich.pretty import pprint

from argonaut import *


def build(program, tokens):
    return invoke(program, [
        default_help("Build the given targets.", short="h"),
        Switch("release", short="r", descr="Build with optimizations."),
        Trail("targets", optional=True),
    ], tokens)


def main():
    return invoke("argonaut", [
        default_help("""
            A small demonstration of the argonaut parser.
        """, short="h"),
        default_version(__version__),
        Count("verbose", short="v", descr="Print more details; repeat for even more."),
        Option("exclude", short="x", param="PATTERN", descr="Skip the files matching PATTERN."),
        Collect("include", short="i", param="PATH", descr="Add PATH to the search list."),
        Subcommand("build", build, descr="Build the given targets."),
    ])


if __name__ == '__main__':
    pprint(main())
