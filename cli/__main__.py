"""
Runs the bro command line as ``python -m cli``, same as the ``bro`` script.
"""

from . import main

if __name__ == '__main__':
    main(prog_name='bro')
