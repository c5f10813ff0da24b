"""Runs kial source files, or the interactive interpreter when no file is given. Also uses the error handling context
manager. Called from the kial console script.
"""

import argparse

from kial.lang.error import ErrorHandler
from kial.lang.session import Session
from kial.lang.shell import Shell


def main(argv=None):
    """Runs kial interpreter. Called from kial console script."""
    with ErrorHandler() as error_handler:
        parser = argparse.ArgumentParser(prog="kial")
        parser.add_argument("file", help="file to interpret and run (if empty, goes to command-line mode)", nargs="?")
        parser.add_argument("--infix", action="store_true",
                            help="disable operator precedence: operations group to the right")
        parser.add_argument("--trace", action="store_true", help="print tokens, trees and values as they are made")
        args = parser.parse_args(argv)

        error_handler.trace = args.trace
        resolve_precedence = not args.infix

        if args.file is not None:
            sess = Session(error_handler, args.file, cmd_line=False, resolve_precedence=resolve_precedence)
            sess.run()

            for value in sess.values(exprs_only=True):
                print(value)

        else:
            sess = Session(error_handler, Session.SH_FILE, cmd_line=True, resolve_precedence=resolve_precedence)
            Shell(sess).cmdloop()


if __name__ == "__main__":
    main()
