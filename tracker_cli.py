"""CLI tool for driving a running Combat Tracker.

Usage:
    python tracker_cli.py list
    python tracker_cli.py add --name "Goblin" --power 6 --skill 4 --resistance 5 --type enemy
    python tracker_cli.py resource --id 2 --kind health --value -5
    python tracker_cli.py initiative --id 2 --value 14
    python tracker_cli.py zone --id 2 --section 4
    python tracker_cli.py combat toggle|start|advance|status
    python tracker_cli.py roll --attribute-value 10 --target 15
    python tracker_cli.py export --output characters.json
    python tracker_cli.py delete --id 2

Environment variables:
    TRACKER_URL: Server URL (default: http://127.0.0.1:8000)
"""

import argparse
import json
import os
import sys

import httpx

DEFAULT_URL = os.environ.get("TRACKER_URL", "http://127.0.0.1:8000")


def _request(method: str, url: str, **kwargs) -> httpx.Response:
    """Make an HTTP request, handling connection errors."""
    kwargs.setdefault("timeout", 10.0)
    try:
        return httpx.request(method, url, **kwargs)
    except httpx.ConnectError:
        print(f"Error: Could not connect to server at {url}", file=sys.stderr)
        print("Is the server running?", file=sys.stderr)
        sys.exit(1)


def _handle_error(resp: httpx.Response) -> None:
    """Print the server's rejection message and exit."""
    if resp.status_code in (400, 409, 422):
        detail = resp.json().get("detail", "Rejected")
        print(f"Error: {detail}", file=sys.stderr)
        sys.exit(1)
    elif resp.status_code != 200:
        print(f"Error: {resp.status_code}: {resp.text}", file=sys.stderr)
        sys.exit(1)


def _print_effect(data: dict) -> None:
    if not data.get("changed"):
        print("Nothing changed (unknown character?)")
        return
    line = f"OK: {data['command_type']}"
    if data.get("value") is not None:
        line += f" -> {data['value']}"
    if data.get("delta"):
        line += f" ({data['delta']})"
    print(line)


def list_characters(url: str) -> None:
    """Print the roster in display order."""
    resp = _request("GET", f"{url}/roster")
    _handle_error(resp)
    data = resp.json()
    print(f"Mode: {data['mode']}")
    if not data["characters"]:
        print("No characters.")
        return
    print(f"{'':<2}{'ID':<4} {'NAME':<20} {'TYPE':<9} {'HEALTH':<10} {'MANA':<10} {'ACTION':<10} {'ZONE':<4}")
    print("-" * 74)
    for char in data["characters"]:
        marker = ">" if char["is_current_turn"] else ("!" if char["near_death"] else "")
        print(
            f"{marker:<2}{char['id']:<4} {char['name']:<20} {char['type']:<9} "
            f"{char['health_display']:<10} {char['mana_display']:<10} "
            f"{char['action_display']:<10} {char['battlefield_section']:<4}"
        )


def add_character(url: str, args: argparse.Namespace) -> None:
    """Add a character to the roster."""
    body = {
        "name": args.name,
        "type": args.type,
        "hidden_values": args.hidden,
        "power": args.power,
        "skill": args.skill,
        "resistance": args.resistance,
    }
    if args.avatar:
        body["avatar"] = args.avatar
    resp = _request("POST", f"{url}/roster", json=body)
    _handle_error(resp)
    data = resp.json()
    print(data["message"])
    print(f"ID: {data['character_id']}")


def delete_character(url: str, character_id: int) -> None:
    """Remove a character."""
    resp = _request("DELETE", f"{url}/roster/{character_id}")
    _handle_error(resp)
    _print_effect(resp.json())


def update_resource(url: str, character_id: int, kind: str, value: str) -> None:
    """Edit a resource bar."""
    resp = _request("POST", f"{url}/roster/{character_id}/resources/{kind}", json={"value": value})
    _handle_error(resp)
    _print_effect(resp.json())


def set_initiative(url: str, character_id: int, value: int) -> None:
    """Set a character's initiative."""
    resp = _request("PUT", f"{url}/roster/{character_id}/initiative", json={"initiative": value})
    _handle_error(resp)
    _print_effect(resp.json())


def set_zone(url: str, character_id: int, section: int) -> None:
    """Move a character on the battlefield."""
    resp = _request("PUT", f"{url}/roster/{character_id}/zone", json={"section": section})
    _handle_error(resp)
    _print_effect(resp.json())


def combat(url: str, action: str) -> None:
    """Toggle, start or advance combat, then print the order."""
    if action == "status":
        resp = _request("GET", f"{url}/combat")
    else:
        resp = _request("POST", f"{url}/combat/{action}")
    _handle_error(resp)
    data = resp.json()
    print(f"Mode: {data['mode']}")
    for entry in data["order"]:
        marker = ">" if entry["id"] == data["current_turn_id"] else " "
        order = entry["turn_order"] if entry["turn_order"] is not None else entry["initiative"]
        print(f"{marker} {order:>4}  {entry['name']}")


def roll_dice(url: str, args: argparse.Namespace) -> None:
    """Roll dice and print the outcome."""
    body = {
        "dice_count": args.dice,
        "modifier": args.modifier,
        "target": args.target,
        "attribute": args.attribute,
    }
    if args.character is not None:
        body["character_id"] = args.character
    else:
        body["attribute_value"] = args.attribute_value
    resp = _request("POST", f"{url}/dice/roll", json=body)
    _handle_error(resp)
    outcome = resp.json()["outcome"]
    if outcome is None:
        print("Character not found")
        return
    print(f"Dice:   {outcome['dice']}")
    print(f"Result: {outcome['final']} ({outcome['base']} + {outcome['critical_bonus']} critical)")
    if outcome["grade"]:
        print(f"Grade:  {outcome['grade'].replace('_', ' ').upper()}")


def export_roster(url: str, output: str) -> None:
    """Download the roster as JSON."""
    resp = _request("GET", f"{url}/roster/export")
    _handle_error(resp)
    with open(output, "w") as f:
        json.dump(resp.json(), f, indent=2)
    print(f"Exported {len(resp.json())} characters to {output}")


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Drive a running Combat Tracker",
    )
    parser.add_argument(
        "--url",
        default=DEFAULT_URL,
        help=f"Server URL (default: {DEFAULT_URL}, or set TRACKER_URL env var)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("list", help="List the roster")

    add_parser = subparsers.add_parser("add", help="Add a character")
    add_parser.add_argument("--name", required=True, help="Character name")
    add_parser.add_argument("--power", default=None, help="Power (default 10)")
    add_parser.add_argument("--skill", default=None, help="Skill (default 8)")
    add_parser.add_argument("--resistance", default=None, help="Resistance (default 12)")
    add_parser.add_argument(
        "--type",
        default="player",
        choices=["player", "enemy", "friendly", "neutral"],
    )
    add_parser.add_argument("--avatar", default=None, help="Avatar URL")
    add_parser.add_argument("--hidden", action="store_true", help="Hide values on the card")

    delete_parser = subparsers.add_parser("delete", help="Remove a character")
    delete_parser.add_argument("--id", type=int, required=True)

    resource_parser = subparsers.add_parser("resource", help="Edit a resource bar")
    resource_parser.add_argument("--id", type=int, required=True)
    resource_parser.add_argument("--kind", required=True, choices=["health", "mana", "action"])
    resource_parser.add_argument("--value", required=True, help="+N, -N or N")

    initiative_parser = subparsers.add_parser("initiative", help="Set initiative")
    initiative_parser.add_argument("--id", type=int, required=True)
    initiative_parser.add_argument("--value", type=int, required=True)

    zone_parser = subparsers.add_parser("zone", help="Move a character to a battlefield zone")
    zone_parser.add_argument("--id", type=int, required=True)
    zone_parser.add_argument("--section", type=int, required=True)

    combat_parser = subparsers.add_parser("combat", help="Combat mode controls")
    combat_parser.add_argument("action", choices=["toggle", "start", "advance", "status"])

    roll_parser = subparsers.add_parser("roll", help="Roll dice")
    roll_parser.add_argument("--dice", type=int, default=3)
    roll_parser.add_argument("--character", type=int, default=None, help="Roll for a roster character")
    roll_parser.add_argument(
        "--attribute",
        default="power",
        choices=["power", "skill", "resistance"],
    )
    roll_parser.add_argument("--attribute-value", type=int, default=0)
    roll_parser.add_argument("--modifier", type=int, default=0)
    roll_parser.add_argument("--target", type=int, default=0)

    export_parser = subparsers.add_parser("export", help="Export the roster to a JSON file")
    export_parser.add_argument("--output", default="characters.json")

    args = parser.parse_args()

    if args.command == "list":
        list_characters(args.url)
    elif args.command == "add":
        add_character(args.url, args)
    elif args.command == "delete":
        delete_character(args.url, args.id)
    elif args.command == "resource":
        update_resource(args.url, args.id, args.kind, args.value)
    elif args.command == "initiative":
        set_initiative(args.url, args.id, args.value)
    elif args.command == "zone":
        set_zone(args.url, args.id, args.section)
    elif args.command == "combat":
        combat(args.url, args.action)
    elif args.command == "roll":
        roll_dice(args.url, args)
    elif args.command == "export":
        export_roster(args.url, args.output)


if __name__ == "__main__":
    main()
