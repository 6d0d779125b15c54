#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Command-line entry point.

Usage::

    makecmd --scatter ngc188.scatter --output ngc188 \\
            --model-file chaboyer_ubvrijhk.h5 --min-mag 12 --max-mag 18
"""

import sys

from .analysis.makecmd import MakeCMD
from .config import Settings
from .errors import FileNotFound, InvalidConfiguration, ParseError

__all__ = ["main"]


def main(argv=None):
    """
    Run `makecmd`.

    Returns
    -------
    status : int
        0 on success, 1 on a fatal error.
    """
    settings = Settings.from_args(argv)

    try:
        MakeCMD(settings).run()
    except (FileNotFound, ParseError, InvalidConfiguration, RuntimeError) as e:
        sys.stderr.write("***Error: {}***\n".format(e))
        sys.stderr.write("[Exiting...]\n")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
