import asyncio

from mere import MUST_EQUAL, ArityError, TaskRegistry

registry = TaskRegistry()


@registry.task
def greet(name: str) -> str:
    return f"Hello, {name}!"


@registry.task
def shout(text: str) -> str:
    return text.upper()


async def main():
    print(registry.handle("greet").make("world"))
    print(greet.then("shout").make("task"))
    print(await registry.sequence("greet", "shout").promise("promise"))

    registry.policy.mode = MUST_EQUAL
    try:
        greet.make()
    except ArityError as error:
        print(f"Rejected: {error}")


if __name__ == "__main__":
    asyncio.run(main())
