import sys

from facet import Runtime, native, text_template
from facet.facet_core import Number


def classes_demo(rt: Runtime):
    """Classes built from scopes: `()` makes an instance that `becomes` the methods object."""
    Person = rt.new_class("Person")

    @native("Person::init")
    def init(this, first, last):
        this["first"] = first
        this["last"] = last

    methods = rt.get_attr(Person, "instance_methods")
    methods["init"] = init
    methods["@text"] = text_template("{{first}} {{last}}")

    sam = rt.call(Person, "Sam", "W")
    rt.print(sam)
    rt.assert_(rt.text(sam) == "Sam W", "text(sam) == 'Sam W'")
    return sam


def comparable_demo(rt: Runtime):
    """A `<=>` on the instance methods plus the Comparable mixin gives all four comparisons."""
    Person = rt.new_class(
        "Person",
        init=lambda this, name, age: (rt.set_attr(this, "name", name), rt.set_attr(this, "age", age)),
    )
    methods = rt.get_attr(Person, "instance_methods")
    methods["<=>"] = native("Person::<=>")(lambda a, b: rt.get_attr(a, "age") - rt.get_attr(b, "age"))
    methods["@text"] = text_template("{{name}} ({{age}})")
    rt.extend(methods, rt.get_attr(rt.scope, "Comparable"))

    sam = rt.call(Person, "Sam", 20)
    sally = rt.call(Person, "Sally", 22)
    rt.print(sam, "<", sally, "=", rt.lt(sam, sally))
    rt.assert_(rt.lt(sam, sally), "sam < sally")
    rt.assert_(rt.le(sam, sally), "sam <= sally")
    rt.assert_(not rt.gt(sam, sally), "!(sam > sally)")
    rt.assert_(not rt.ge(sam, sally), "!(sam >= sally)")
    return [sam, sally]


def hijack_demo(rt: Runtime):
    """Literal-suffix hijacking: `3 : "px"` is dispatched to `:` on Number."""

    @native("Number:::")
    def with_unit(klass, number, unit):
        return rt.new_object(value=number, unit=unit, **{"@text": text_template("{{value}}{{unit}}")})

    had_colon = Number.has_own(":")
    previous = Number.attributes.get(":", None)
    Number[":"] = with_unit
    try:
        width = rt.colon(3, "px")
        rt.print(width)
        rt.assert_(rt.text(width) == "3px", "3 : 'px' == '3px'")
    finally:
        if had_colon:
            Number[":"] = previous
        else:
            del Number[":"]
    return width


SCENARIOS = {
    "classes": classes_demo,
    "comparable": comparable_demo,
    "hijack": hijack_demo,
}


def run_scenario(name: str) -> int:
    """Run one scenario, print its output, and return a process exit status."""
    scenario = SCENARIOS.get(name)
    if scenario is None:
        print(f"Error: unknown scenario: {name}", file=sys.stderr)
        return 1
    result = Runtime().run(scenario)
    for line in result.stdout:
        print(line)
    if result.status == 'error':
        print(result.format_error(), file=sys.stderr)
        return 1
    return 0


def main(argv=None):
    """Run the named scenarios, or all of them when none are given."""
    args = list(sys.argv[1:] if argv is None else argv)
    names = [a for a in args if not a.startswith("-")] or list(SCENARIOS)
    status = 0
    for name in names:
        print(f"== {name}")
        status = max(status, run_scenario(name))
    return status


if __name__ == "__main__":
    raise SystemExit(main())
