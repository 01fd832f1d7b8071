import argparse
import json
import logging
import os
import sys
from pathlib import Path

from .client import StoreClient
from .config import ClientConfig
from .exceptions import InvalidArgument, StoreClientError

logger = logging.getLogger(__name__)

CREDENTIALS_FILE = Path.home() / ".cache" / "rocksdb-client" / "credentials.json"

HELP_TEXT = """
    Available commands:
    - get <db> <key> [key ...]
    - put <db> <key> <value> [<key> <value> ...]
    - delete <db> <key> [key ...]
    - create <db>
    - drop <db>
    - stats <db>
    - help
    - exit
    Examples:
    > create users
    > put users alice 42 bob 17
    > get users alice bob carol
    > delete users bob
    > stats users
    """


def load_credentials(path=None):
    """Return (username, password) saved in the credentials file, if any."""
    path = path or CREDENTIALS_FILE
    if not path.exists():
        return None, None
    try:
        with open(path) as f:
            creds = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise InvalidArgument(f"Cannot read credentials file {path}: {e}") from e
    if not isinstance(creds, dict):
        raise InvalidArgument(f"Cannot read credentials file {path}: expected a JSON object")
    return creds.get("username"), creds.get("password")


def save_credentials(username, password, path=None):
    path = path or CREDENTIALS_FILE
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump({"username": username, "password": password}, f)


def show(value):
    if value is None:
        return "(nil)"
    return value.decode("utf-8", errors="replace")


def run_command(client, command):
    """Execute one tokenized command; return the text to print, or None to exit."""
    cmd = command[0].lower()
    args = command[1:]

    if cmd == "help":
        return HELP_TEXT
    if cmd == "exit":
        return None
    if cmd == "get" and len(args) >= 2:
        values = client.get(args[0], [k.encode() for k in args[1:]])
        return "\n".join(f"{key}: {show(value)}" for key, value in zip(args[1:], values))
    if cmd == "put" and len(args) >= 3 and len(args) % 2 == 1:
        pairs = args[1:]
        client.put(args[0], [k.encode() for k in pairs[0::2]], [v.encode() for v in pairs[1::2]])
        return "OK"
    if cmd == "delete" and len(args) >= 2:
        client.delete(args[0], [k.encode() for k in args[1:]])
        return "OK"
    if cmd == "create" and len(args) == 1:
        client.create_database(args[0])
        return "OK"
    if cmd == "drop" and len(args) == 1:
        client.drop_database(args[0])
        return "OK"
    if cmd == "stats" and len(args) == 1:
        return client.get_stats(args[0])
    return "Invalid command. Type 'help' for usage."


def build_config(args):
    """Credentials come from the command line, then ROCKSDB_USERNAME/PASSWORD, then the saved file."""
    username, password = args.user, args.password
    env_credentials = os.getenv("ROCKSDB_USERNAME") or os.getenv("ROCKSDB_PASSWORD")
    if username is None and password is None and not env_credentials:
        username, password = load_credentials()
    config = ClientConfig.from_env(host=args.host, port=args.port, username=username, password=password)
    if args.save_credentials and config.auth_enabled:
        save_credentials(config.username, config.password)
    return config


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Interactive shell for a rocksdb HTTP server")
    parser.add_argument("host", nargs="?", help="Server host (default: $ROCKSDB_HOST or 127.0.0.1)")
    parser.add_argument("port", nargs="?", type=int, help="Server port (default: $ROCKSDB_PORT or 8516)")
    parser.add_argument("--user", help="Username for HTTP Basic auth")
    parser.add_argument("--password", help="Password for HTTP Basic auth")
    parser.add_argument("--save-credentials", action="store_true",
                        help=f"Remember --user/--password in {CREDENTIALS_FILE}")
    parser.add_argument("--verbose", action="store_true", help="Log every request")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    try:
        config = build_config(args)
    except StoreClientError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    logger.info("Connecting to %s", config.base_url)
    with StoreClient(config) as client:
        while True:
            try:
                command = input("Enter command: ").strip().split()
            except EOFError:
                break
            if not command:
                continue
            try:
                output = run_command(client, command)
            except StoreClientError as e:
                print(f"Error: {e}")
                continue
            if output is None:
                break
            print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
