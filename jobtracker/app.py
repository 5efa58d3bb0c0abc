import argparse
from typing import Dict, List

from . import __version__
from .board import BACKEND_OFFLINE, BoardController, ColumnTarget, JobTarget
from .client import Job, JobStoreClient
from .env import load_env, require_database_url, server_port
from .errors import StoreUnavailable
from .logger import get_logger
from .schema import STATUS_VALUES, Status

COLUMN_WIDTH = 24
SEP = " | "


def _cell(text: str, width: int = COLUMN_WIDTH) -> str:
    if len(text) > width:
        text = text[: width - 1] + "~"
    return text.ljust(width)


def render_columns(columns: Dict[Status, List[Job]]) -> str:
    """Lay the four status columns out side by side, one card per row."""
    statuses = list(columns)
    lines = [
        SEP.join(_cell(f"{s.value} ({len(columns[s])})") for s in statuses),
        SEP.join("-" * COLUMN_WIDTH for _ in statuses),
    ]
    rows = max((len(jobs) for jobs in columns.values()), default=0)
    for r in range(rows):
        cells = []
        for s in statuses:
            jobs = columns[s]
            cells.append(_cell(f"{jobs[r].title} @ {jobs[r].company}" if r < len(jobs) else ""))
        lines.append(SEP.join(cells).rstrip())
    return "\n".join(lines)


def _open_board(args: argparse.Namespace) -> BoardController:
    client = JobStoreClient(base_url=args.api_url, timeout=args.timeout, retries=args.retries)
    board = BoardController(client)
    board.load_initial()
    if board.backend_status == BACKEND_OFFLINE:
        _print_notifications(board)
        raise SystemExit(f"Backend offline: {client.base_url}")
    return board


def _print_notifications(board: BoardController) -> None:
    for note in board.drain_notifications():
        print(f"[{note.level}] {note.message}")


def _show(board: BoardController) -> None:
    print(render_columns(board.columns_view()))
    ids = [f"  {job.id}  {job.title} @ {job.company} [{job.status.value}]" for job in board.jobs]
    if ids:
        print("\nIds:")
        print("\n".join(ids))


def cmd_serve(args: argparse.Namespace) -> None:
    import uvicorn

    from .server import create_app
    from .store import JobStore

    database_url = require_database_url(args.database_url)
    try:
        store = JobStore.from_url(database_url)
    except StoreUnavailable as e:
        raise SystemExit(str(e))
    get_logger().info("Starting job tracker API", host=args.host, port=server_port(args.port))
    uvicorn.run(create_app(store), host=args.host, port=server_port(args.port))


def cmd_board(args: argparse.Namespace) -> None:
    board = _open_board(args)
    _show(board)


def cmd_add(args: argparse.Namespace) -> None:
    board = _open_board(args)
    job = board.add_job(args.title, args.company, Status(args.status))
    _print_notifications(board)
    if job is None:
        raise SystemExit(1)
    print(f"Added {job.id}: {job.title} @ {job.company} [{job.status.value}]")
    _show(board)


def cmd_move(args: argparse.Namespace) -> None:
    board = _open_board(args)
    if board.find(args.id) is None:
        raise SystemExit(f"Job not found: {args.id}")
    target = JobTarget(args.onto) if args.onto else ColumnTarget(Status(args.status))
    board.begin_drag(args.id)
    moved = board.end_drag(args.id, target)
    _print_notifications(board)
    if not moved:
        print("No change.")
    _show(board)


def cmd_remove(args: argparse.Namespace) -> None:
    board = _open_board(args)
    if board.find(args.id) is None:
        raise SystemExit(f"Job not found: {args.id}")
    removed = board.remove_job(args.id)
    _print_notifications(board)
    if not removed:
        raise SystemExit(1)
    print(f"Removed {args.id}")
    _show(board)


def _add_client_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--api-url", help="Job store API root (or set JOBTRACKER_API_URL; default http://localhost:5000)")
    p.add_argument("--timeout", type=float, default=5.0, help="Request timeout in seconds (default 5)")
    p.add_argument("--retries", type=int, default=0, help="Retries for loading the board on network errors (default 0)")


def main():
    # Load .env if present (JOBTRACKER_DATABASE_URL, JOBTRACKER_API_URL, etc.)
    load_env()
    parser = argparse.ArgumentParser(prog="jobtracker", description="Job application tracker: REST store and Kanban board")
    parser.add_argument("--version", action="store_true", help="Show version")

    subparsers = parser.add_subparsers(dest="command")
    srv = subparsers.add_parser("serve", help="Run the job store HTTP API")
    srv.add_argument("--database-url", help="SQLAlchemy database URL (or set JOBTRACKER_DATABASE_URL)")
    srv.add_argument("--host", default="127.0.0.1", help="Bind address (default 127.0.0.1)")
    srv.add_argument("--port", type=int, help="Port (or set PORT; default 5000)")
    srv.set_defaults(func=cmd_serve)

    brd = subparsers.add_parser("board", help="Show the board columns")
    _add_client_args(brd)
    brd.set_defaults(func=cmd_board)

    add = subparsers.add_parser("add", help="Add a job application")
    add.add_argument("--title", required=True, help="Role title")
    add.add_argument("--company", required=True, help="Employer name")
    add.add_argument("--status", default=Status.APPLIED.value, choices=STATUS_VALUES, help="Initial column (default Applied)")
    _add_client_args(add)
    add.set_defaults(func=cmd_add)

    mov = subparsers.add_parser("move", help="Drag a job to a column or onto another job")
    mov.add_argument("--id", required=True, help="Id of the job to move")
    dest = mov.add_mutually_exclusive_group(required=True)
    dest.add_argument("--status", choices=STATUS_VALUES, help="Drop into this column")
    dest.add_argument("--onto", help="Drop onto the job with this id (takes its status)")
    _add_client_args(mov)
    mov.set_defaults(func=cmd_move)

    rem = subparsers.add_parser("remove", help="Delete a job application")
    rem.add_argument("--id", required=True, help="Id of the job to delete")
    _add_client_args(rem)
    rem.set_defaults(func=cmd_remove)

    args = parser.parse_args()

    if args.version:
        print(__version__)
        return

    if hasattr(args, "func"):
        args.func(args)
        return

    parser.print_help()


if __name__ == "__main__":
    main()
