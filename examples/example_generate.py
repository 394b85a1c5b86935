from mere import TaskRegistry

registry = TaskRegistry()

registry.bind("load", lambda name: {"name": name, "lines": ["# Title", "body"]})
registry.bind("count", lambda doc: len(doc["lines"]))
registry.bind("scale", lambda total, factor: total * factor)


def main():
    steps = registry.generate(["load", "count", "scale"], pass_args=True)

    doc = steps.send("index.md")
    print(f"loaded: {doc}")

    total = steps.send(None)
    print(f"lines: {total}")

    print(f"scaled: {steps.send(10)}")

    try:
        steps.send(None)
    except StopIteration as stop:
        print(f"done, last result {stop.value}")


if __name__ == "__main__":
    main()
