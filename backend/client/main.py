"""
Command-line front end for the CareConnect API.

    python -m client.main support list
    python -m client.main support submit --name "Jane Doe" --email jane@example.com \
        --message "Please call me back about home visits"
    python -m client.main appointments book --name "Jane Doe" --email jane@example.com \
        --date "2026-11-02 10:30"
    python -m client.main chat
"""

import argparse
import logging
import sys

from client.api_client import CareConnectClient, ServerUnreachable
from client.sync import AppointmentController, OFFLINE_TEXT, SupportController
from core import config
from core.chatbot import respond
from core.models import AppointmentStatus, AppointmentType, InquiryType, enum_values

EXIT_WORDS = {"quit", "exit", "bye"}


def print_notifications(controller, out=None, err=None):
    out = out or sys.stdout
    err = err or sys.stderr
    for note in controller.drain_notifications():
        stream = err if note.level == "error" else out
        print(f"[{note.level}] {note.text}", file=stream)


def run_chat(input_fn=input, out=None) -> int:
    """Local chatbot loop; never touches the network"""
    out = out or sys.stdout
    print("CareConnect assistant. Type 'quit' to leave.", file=out)
    while True:
        try:
            text = input_fn("you> ").strip()
        except (EOFError, KeyboardInterrupt):
            print(file=out)
            return 0
        if not text:
            continue
        if text.lower() in EXIT_WORDS:
            return 0
        print(f"bot> {respond(text)}", file=out)


def _compact(values):
    return {key: value for key, value in values.items() if value is not None}


def run_support(client, args) -> int:
    controller = SupportController(client)
    if args.action == "submit":
        result = controller.submit(_compact({
            "fullName": args.name,
            "email": args.email,
            "inquiryType": args.type,
            "message": args.message,
        }))
    elif args.action == "delete":
        result = controller.delete(args.id)
    else:
        result = None
        controller.refresh()

    print_notifications(controller)
    print(controller.render())
    return 1 if result is not None and not result.success else 0


def run_appointments(client, args) -> int:
    controller = AppointmentController(client)
    if args.action == "book":
        result = controller.submit(_compact({
            "patientName": args.name,
            "email": args.email,
            "phone": args.phone,
            "appointmentDate": args.date,
            "appointmentType": args.type,
            "notes": args.notes,
        }))
    elif args.action == "update":
        result = controller.update(args.id, _compact({
            "patientName": args.name,
            "email": args.email,
            "phone": args.phone,
            "status": args.status,
            "appointmentDate": args.date,
            "appointmentType": args.type,
            "notes": args.notes,
        }))
    elif args.action == "delete":
        result = controller.delete(args.id)
    elif args.action == "show":
        try:
            result = client.get_appointment(args.id)
        except ServerUnreachable as e:
            print(f"[error] {e}", file=sys.stderr)
            print(OFFLINE_TEXT)
            return 1
        if result.success:
            print(controller.format_item(result.data))
        else:
            print(f"[error] {result.message}", file=sys.stderr)
        return 0 if result.success else 1
    else:
        result = None
        controller.refresh()

    print_notifications(controller)
    print(controller.render())
    return 1 if result is not None and not result.success else 0


def run_health(client) -> int:
    try:
        result = client.health()
    except ServerUnreachable as e:
        print(f"[error] {e}", file=sys.stderr)
        return 1
    body = result.body
    print(f"API: {body.get('status')} - database {body.get('database')}")
    return 0 if result.status_code == 200 else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="CareConnect API client")
    parser.add_argument("--url", default=config.API_URL, help="API base URL")
    commands = parser.add_subparsers(dest="command", required=True)

    support = commands.add_parser("support", help="Support requests")
    support_actions = support.add_subparsers(dest="action", required=True)
    support_actions.add_parser("list")
    submit = support_actions.add_parser("submit")
    submit.add_argument("--name", required=True)
    submit.add_argument("--email", required=True)
    submit.add_argument("--type", choices=enum_values(InquiryType))
    submit.add_argument("--message", required=True)
    delete = support_actions.add_parser("delete")
    delete.add_argument("id")

    appointments = commands.add_parser("appointments", help="Appointments")
    appointment_actions = appointments.add_subparsers(dest="action", required=True)
    appointment_actions.add_parser("list")
    show = appointment_actions.add_parser("show")
    show.add_argument("id")
    book = appointment_actions.add_parser("book")
    book.add_argument("--name", required=True)
    book.add_argument("--email", required=True)
    book.add_argument("--date", required=True)
    book.add_argument("--phone")
    book.add_argument("--type", choices=enum_values(AppointmentType))
    book.add_argument("--notes")
    update = appointment_actions.add_parser("update")
    update.add_argument("id")
    update.add_argument("--name")
    update.add_argument("--email")
    update.add_argument("--phone")
    update.add_argument("--status", choices=enum_values(AppointmentStatus))
    update.add_argument("--date")
    update.add_argument("--type", choices=enum_values(AppointmentType))
    update.add_argument("--notes")
    remove = appointment_actions.add_parser("delete")
    remove.add_argument("id")

    commands.add_parser("health", help="Check API and database status")
    commands.add_parser("chat", help="Talk to the virtual assistant")
    return parser


def main(argv=None) -> int:
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")
    args = build_parser().parse_args(argv)

    if args.command == "chat":
        return run_chat()

    with CareConnectClient(args.url) as client:
        if args.command == "support":
            return run_support(client, args)
        if args.command == "appointments":
            return run_appointments(client, args)
        return run_health(client)


if __name__ == "__main__":
    sys.exit(main())
