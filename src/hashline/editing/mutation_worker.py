"""Worker entry point for SubprocessMutationExecutor.

Reads one length-delimited mutation request from stdin, applies it and
prints ``NO_CHANGES`` or the raw unified diff. Errors go to stderr with
exit status 1.
"""

import sys

from hashline.editing.exceptions import ExternalMutationError
from hashline.editing.executor import decode_request, perform_mutation


def main() -> int:
    try:
        request = decode_request(sys.stdin.buffer.read())
        output = perform_mutation(request)
    except (ValueError, ExternalMutationError) as exc:
        print(str(exc), file=sys.stderr)
        return 1
    sys.stdout.buffer.write(output.encode("utf-8"))
    return 0


if __name__ == "__main__":
    sys.exit(main())
