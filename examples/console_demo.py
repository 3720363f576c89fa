"""Minimal interactive console for the career assistant features."""

from pathlib import Path

from career_core import BinaryBlob, ConversationLog, RequestDispatcher
from career_core.dispatch import ADVICE_FALLBACK, CAREER_GREETING
from career_core.providers import create_provider


def _read_source(raw: str):
    path = Path(raw.strip()).expanduser()
    if raw.strip() and path.is_file():
        return BinaryBlob.from_path(path)
    return raw


def chat(dispatcher: RequestDispatcher) -> None:
    log = ConversationLog.with_greeting(CAREER_GREETING)
    print("Counsellor:", CAREER_GREETING)
    while True:
        message = input("You (blank to exit): ").strip()
        if not message:
            return
        log.append_user(message)
        reply = dispatcher.advise(log, message)
        print("Counsellor:", reply)
        if reply != ADVICE_FALLBACK:
            log.append_model(reply)


def summarize(dispatcher: RequestDispatcher) -> None:
    source = _read_source(input("Text or file path: "))
    length = input("Length [short/medium/long]: ").strip() or "medium"
    print(dispatcher.summarize(source, length))


def optimize(dispatcher: RequestDispatcher) -> None:
    job = input("Job description: ")
    software = _read_source(input("Software resume (text or path): "))
    core = _read_source(input("Core resume (text or path): "))
    result = dispatcher.synthesize_resume(job, [software, core])
    if result is None:
        print("No result.")
        return
    content = result.content
    print(f"Selected: {result.selected_resume_type}")
    print(f"{content.full_name} - {content.title}")
    print(content.summary)
    print("Skills:", ", ".join(content.skills))
    if result.ungrounded_skills:
        print("Not found in source:", ", ".join(result.ungrounded_skills))


def sentiment(dispatcher: RequestDispatcher) -> None:
    print(dispatcher.analyze_headline(input("Headline: ")))


if __name__ == "__main__":
    dispatcher = RequestDispatcher(create_provider())
    actions = {"1": chat, "2": summarize, "3": optimize, "4": sentiment}
    while True:
        choice = input("[1] counsellor [2] summarizer [3] resume [4] sentiment [q] quit: ").strip()
        if choice == "q":
            break
        action = actions.get(choice)
        if action:
            action(dispatcher)
