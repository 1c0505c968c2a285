# cli.py
import argparse
import sys
from typing import List, Optional

from config import get_settings
from models import Task, TaskCreate, TaskUpdate
from storage import JsonFileTaskStore, StoreUnavailable
import task_manager


def format_task(task: Task) -> str:
    mark = "x" if task.completed else " "
    return (
        f"[{mark}] #{task.id} {task.description} "
        f"(due {task.due_date}, created {task.created_at})"
    )


def print_tasks(tasks: List[Task], grouped: bool = False):
    if not tasks:
        print("No tasks yet.")
        return
    if not grouped:
        for task in tasks:
            print(f"{format_task(task)} [{task.tag}]")
        return
    for tag, group in task_manager.group_by_tag(tasks).items():
        print(f"{tag or '(no tag)'}:")
        for task in group:
            print(f"  {format_task(task)}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Manage the task list stored in a JSON file.")
    parser.add_argument("--file", type=str, default=None, help="Path to the tasks file (defaults to TODO_TASKS_FILE).")
    subparsers = parser.add_subparsers(dest="command", required=True, help="Available commands")

    subparsers.add_parser("serve", help="Run the HTTP API.")

    parser_list = subparsers.add_parser("list", help="List all tasks.")
    parser_list.add_argument("--group", action="store_true", help="Group the tasks by tag.")

    parser_add = subparsers.add_parser("add", help="Create a task.")
    parser_add.add_argument("--tag", type=str, required=True, help="Tag used to group the task.")
    parser_add.add_argument("--description", type=str, required=True, help="What needs to be done.")
    parser_add.add_argument("--due", type=str, required=True, help="Due date, e.g. 2024-02-10.")

    parser_update = subparsers.add_parser("update", help="Change some fields of a task.")
    parser_update.add_argument("id", type=int)
    parser_update.add_argument("--tag", type=str, default=None)
    parser_update.add_argument("--description", type=str, default=None)
    parser_update.add_argument("--due", type=str, default=None)
    state = parser_update.add_mutually_exclusive_group()
    state.add_argument("--completed", dest="completed", action="store_true", default=None,
                       help="Mark the task as completed.")
    state.add_argument("--pending", dest="completed", action="store_false",
                       help="Mark the task as not completed.")

    parser_done = subparsers.add_parser("done", help="Mark a task as completed.")
    parser_done.add_argument("id", type=int)

    parser_delete = subparsers.add_parser("delete", help="Delete a task.")
    parser_delete.add_argument("id", type=int)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()

    if args.command == "serve":
        from main import serve
        serve(settings)
        return 0

    store = JsonFileTaskStore(args.file or settings.tasks_file)
    try:
        if args.command == "list":
            print_tasks(task_manager.list_tasks(store), grouped=args.group)
        elif args.command == "add":
            task = task_manager.create_task(
                store, TaskCreate(tag=args.tag, description=args.description, due_date=args.due)
            )
            print(f"Created task #{task.id}.")
        elif args.command == "update":
            changes = {
                "tag": args.tag,
                "description": args.description,
                "due_date": args.due,
                "completed": args.completed,
            }
            task = task_manager.update_task(
                store, args.id, TaskUpdate(**{k: v for k, v in changes.items() if v is not None})
            )
            print(f"Updated: {format_task(task)}")
        elif args.command == "done":
            task = task_manager.complete_task(store, args.id)
            print(f"Completed: {format_task(task)}")
        elif args.command == "delete":
            task_manager.delete_task(store, args.id)
            print(f"Deleted task #{args.id}.")
    except (task_manager.TaskError, StoreUnavailable) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
