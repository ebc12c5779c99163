"""Squawk プッシュ送信スクリプト。

HTTP POST で /api/v1/events に push イベントを送信する開発・テスト用スクリプト。
"""

import argparse
import http.client
import json
import sys
import time

AUTHORS = {
    "key_asser": "Asser Samak",
    "key_cezanne": "Cezanne Camacho",
    "key_jlin": "Jessica Lin",
    "key_lyla": "Lyla Fujiwara",
    "key_nikita": "Nikita Bhatt",
    "key_test": "TestAccount",
}


def create_parser() -> argparse.ArgumentParser:
    """コマンドライン引数パーサーを作成する。"""
    parser = argparse.ArgumentParser(
        description="Squawk を push イベントとしてサーバーに送信する",
    )
    parser.add_argument(
        "-H",
        "--host",
        default="localhost",
        help="サーバーホスト (デフォルト: localhost)",
    )
    parser.add_argument(
        "-p",
        "--port",
        type=int,
        default=8080,
        help="サーバーポート (デフォルト: 8080)",
    )
    parser.add_argument(
        "-a",
        "--author-key",
        choices=sorted(AUTHORS),
        default="key_test",
        help="送信者のキー (デフォルト: key_test)",
    )
    parser.add_argument(
        "-m",
        "--message",
        default="Hello from squawker",
        help="メッセージ本文",
    )
    parser.add_argument(
        "-n",
        "--count",
        type=int,
        default=1,
        help="送信回数 (デフォルト: 1)",
    )
    parser.add_argument(
        "-i",
        "--interval",
        type=float,
        default=0.0,
        help="送信間隔（秒） (デフォルト: 0.0)",
    )
    return parser


def build_payload(author_key: str, message: str) -> dict:
    """push イベントのリクエストボディを作成する。

    date はミリ秒のエポック時刻を文字列で渡す。
    """
    return {
        "type": "push",
        "payload": {
            "from": f"/topics/{author_key}",
            "data": {
                "author": AUTHORS[author_key],
                "authorKey": author_key,
                "message": message,
                "date": str(int(time.time() * 1000)),
            },
        },
    }


def send_squawk(host: str, port: int, payload: dict) -> tuple[bool, str]:
    """push イベントを送信する。

    Args:
        host: サーバーホスト
        port: サーバーポート
        payload: リクエストボディ

    Returns:
        (成功フラグ, メッセージ) のタプル
    """
    try:
        conn = http.client.HTTPConnection(host, port, timeout=30)
        try:
            conn.request(
                "POST",
                "/api/v1/events",
                body=json.dumps(payload),
                headers={"Content-Type": "application/json"},
            )
            response = conn.getresponse()
            body = response.read().decode("utf-8")

            if response.status == 200 or response.status == 201:
                try:
                    data = json.loads(body)
                    event_id = data.get("event_id", "unknown")
                    return True, event_id
                except json.JSONDecodeError:
                    return False, f"Invalid JSON response: {body}"
            else:
                return False, f"{response.status} {response.reason}"
        finally:
            conn.close()
    except ConnectionRefusedError:
        return False, "Connection refused"
    except TimeoutError:
        return False, "Connection timeout"
    except OSError as e:
        return False, str(e)


def main() -> int:
    """メインエントリーポイント。"""
    parser = create_parser()
    args = parser.parse_args()

    url = f"http://{args.host}:{args.port}/api/v1/events"
    print(f"Sending squawk to {url}...")

    for i in range(args.count):
        if i > 0 and args.interval > 0:
            time.sleep(args.interval)

        payload = build_payload(args.author_key, args.message)
        success, message = send_squawk(args.host, args.port, payload)

        if success:
            print(f"[{i + 1}/{args.count}] Event ID: {message} ({args.author_key})")
        else:
            print(f"Error: {message}")
            return 1

    print("Done.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
