import argparse
import logging
import sys

from marshmallow import ValidationError

from sparsecalc.services.matrix_service import MatrixService, Operation
from sparsecalc.utils.sparse_matrix import SparseMatrixError


def read_pasted_matrix(prompt, input_func=input):
    """Read matrix lines until an empty line"""
    print(prompt)
    lines = []
    while True:
        try:
            line = input_func()
        except EOFError:
            break
        if not line.strip():
            break
        lines.append(line)
    return "\n".join(lines)


def read_matrix(path, name, input_func=input):
    if not path:
        path = input_func(f"Enter the file path of the {name} matrix (leave empty to paste it): ").strip()
    if not path:
        return read_pasted_matrix(f"Enter the {name} matrix data, finish with an empty line:", input_func)
    with open(path, encoding='utf-8') as f:
        return f.read()


def build_parser():
    parser = argparse.ArgumentParser(
        prog='sparsecalc',
        description='Add, subtract or multiply two sparse matrices stored as coordinate lists.'
    )
    parser.add_argument('matrix_a', nargs='?', help='file with the first matrix')
    parser.add_argument('matrix_b', nargs='?', help='file with the second matrix')
    parser.add_argument('-o', '--operation', help='operation code (1, 2, 3) or name')
    parser.add_argument('--output', help='file to save the result to')
    parser.add_argument('-v', '--verbose', action='store_true', help='log each calculation')
    return parser


def main(argv=None, input_func=input):
    args = build_parser().parse_args(argv)
    level = logging.DEBUG if args.verbose else logging.WARNING
    logging.basicConfig(level=level, format='%(levelname)s %(name)s: %(message)s')
    logging.getLogger('sparsecalc').setLevel(level)
    service = MatrixService()

    print("Available operations:")
    for operation in Operation:
        print(f"{operation.code}: {operation.label}")

    try:
        matrix_a = read_matrix(args.matrix_a, 'first', input_func)
        matrix_b = read_matrix(args.matrix_b, 'second', input_func)

        choice = args.operation
        if choice is None:
            choice = input_func("Choose an operation (1, 2, or 3): ")
        operation = Operation.from_choice(choice)

        result = service.calculate(matrix_a, matrix_b, operation)
        print(f"Output of {operation.label}:\n")
        print(result.serialize())

        if args.output:
            with open(args.output, 'w', encoding='utf-8') as f:
                f.write(result.serialize())
            print(f"Output file saved to {args.output}")
    except ValidationError as e:
        print(f"Error: {'; '.join(e.normalized_messages().get('operation', [str(e)]))}", file=sys.stderr)
        return 1
    except (SparseMatrixError, OSError, UnicodeDecodeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except (EOFError, KeyboardInterrupt):
        print("Error: input closed before the calculation was complete", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
