import datetime
import random
from typing import Optional


HOSTS = ["73.92.251.192", "10.0.0.12", "192.168.1.40", "203.0.113.7", "-"]
USERS = ["-", "-", "-", "alice", "bob"]
METHODS = ["GET", "GET", "GET", "POST", "HEAD"]
PAGES = ["/", "/about/", "/learn/", "/blog/", "/static/app.js", "/static/site.css"]
MISSING = ["/missing", "/wp-login.php", "/old/page.html", "/favicon.ico"]
REFERERS = ["-", "https://www.google.com/", "https://example.com/start.html"]
AGENTS = [
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko)",
    "Mozilla/5.0 (iPhone; CPU iPhone OS 12_1 like Mac OS X) AppleWebKit/605.1.15",
    "curl/8.4.0",
    "",
]


def generate_access_logs(
    filename: str = "access.log",
    target_lines: int = 100000,
    seed: Optional[int] = None,
    not_found_ratio: float = 0.1,
) -> int:
    """
    Write `target_lines` well-formed combined-format lines to `filename`.
    Returns the number of lines written.
    """
    rng = random.Random(seed)
    current_time = datetime.datetime(2018, 12, 16, 6, 25, 9)

    with open(filename, "w", encoding="utf-8") as f:
        for _ in range(target_lines):
            current_time += datetime.timedelta(seconds=rng.randint(0, 5))
            ts = current_time.strftime("%d/%b/%Y:%H:%M:%S +0000")

            if rng.random() < not_found_ratio:
                status = 404
                request = f"GET {rng.choice(MISSING)} HTTP/1.1"
            elif rng.random() < 0.02:
                # unreadable request line
                status = 400
                request = "-"
            else:
                status = rng.choice([200, 200, 200, 301, 304, 500])
                request = f"{rng.choice(METHODS)} {rng.choice(PAGES)} HTTP/1.1"

            f.write(
                f"{rng.choice(HOSTS)} - {rng.choice(USERS)} [{ts}] "
                f"\"{request}\" {status} {rng.randint(200, 20000)} "
                f"\"{rng.choice(REFERERS)}\" \"{rng.choice(AGENTS)}\"\n"
            )

    return target_lines


if __name__ == "__main__":
    count = generate_access_logs()
    print(f"Generated {count} lines in access.log")
