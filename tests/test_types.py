"""Tests for TypeScript prop type resolution."""

from propflow.extract import TypeResolver


class TestTypeResolver:
    def test_interface_members(self, parse):
        resolver = TypeResolver(parse("""\
            interface ButtonProps {
              label: string;
              "aria-label"?: string;
              onClick(event: MouseEvent): void;
            }
        """))
        assert resolver.resolve_name("ButtonProps") == ["label", "aria-label", "onClick"]

    def test_unknown_name_resolves_to_nothing(self, parse):
        resolver = TypeResolver(parse("type A = { a: string };\n"))
        assert resolver.resolve_name("Imported") == []
        assert not resolver.has_type("Imported")
        assert resolver.has_type("A")


class TestCompositeTypes:
    def test_intersection(self, parse):
        resolver = TypeResolver(parse("""\
            type Props = { a: string } & { b: number } & { a: string; c: boolean };
        """))
        assert resolver.resolve_name("Props") == ["a", "b", "c"]

    def test_union_collects_every_branch(self, parse):
        resolver = TypeResolver(parse("""\
            type Shape =
              | { kind: "circle"; radius: number }
              | { kind: "square"; size: number };
        """))
        assert resolver.resolve_name("Shape") == ["kind", "radius", "size"]

    def test_union_of_named_types(self, parse):
        resolver = TypeResolver(parse("""\
            interface LinkProps { href: string; label: string }
            interface ActionProps { onClick: () => void; label: string }
            type Props = LinkProps | ActionProps;
        """))
        assert resolver.resolve_name("Props") == ["href", "label", "onClick"]

    def test_parenthesized(self, parse):
        resolver = TypeResolver(parse("""\
            type Props = ({ a: string } | { b: string }) & { c: string };
        """))
        assert resolver.resolve_name("Props") == ["a", "b", "c"]

    def test_alias_of_alias(self, parse):
        resolver = TypeResolver(parse("""\
            type Outer = Middle;
            type Middle = Inner;
            type Inner = { value: string };
        """))
        assert resolver.resolve_name("Outer") == ["value"]


class TestInterfaces:
    def test_extends_chain(self, parse):
        resolver = TypeResolver(parse("""\
            interface Base { id: string }
            interface Named extends Base { name: string }
            interface Props extends Named { title: string; id: string }
        """))
        assert resolver.resolve_name("Props") == ["title", "id", "name"]

    def test_extends_several(self, parse):
        resolver = TypeResolver(parse("""\
            interface A { a: string }
            interface B { b: string }
            interface Props extends A, B { c: string }
        """))
        assert resolver.resolve_name("Props") == ["c", "a", "b"]

    def test_repeated_declarations_merge(self, parse):
        resolver = TypeResolver(parse("""\
            interface Props { a: string }
            interface Props { b: string }
        """))
        assert resolver.resolve_name("Props") == ["a", "b"]

    def test_cyclic_types_terminate(self, parse):
        resolver = TypeResolver(parse("""\
            interface A extends B { a: string }
            interface B extends A { b: string }
        """))
        assert resolver.resolve_name("A") == ["a", "b"]

    def test_self_referencing_alias(self, parse):
        resolver = TypeResolver(parse("type Loop = Loop & { x: string };\n"))
        assert resolver.resolve_name("Loop") == ["x"]


class TestGenericWrappers:
    def test_props_with_children(self, parse):
        resolver = TypeResolver(parse("""\
            type Props = PropsWithChildren<{ title: string }>;
        """))
        assert resolver.resolve_name("Props") == ["children", "title"]

    def test_qualified_props_with_ref(self, parse):
        resolver = TypeResolver(parse("""\
            interface Inner { value: string }
            type Props = React.PropsWithRef<Inner>;
        """))
        assert resolver.resolve_name("Props") == ["ref", "value"]

    def test_ref_attributes(self, parse):
        resolver = TypeResolver(parse("""\
            type Props = { value: string } & RefAttributes<HTMLInputElement>;
        """))
        assert resolver.resolve_name("Props") == ["value", "ref"]

    def test_utility_wrappers_are_transparent(self, parse):
        resolver = TypeResolver(parse("""\
            interface Base { a: string; b: string }
            type Props = Readonly<Partial<Base>>;
        """))
        assert resolver.resolve_name("Props") == ["a", "b"]

    def test_pick_and_omit(self, parse):
        resolver = TypeResolver(parse("""\
            interface Base { a: string; b: string; c: string }
            type Picked = Pick<Base, "a" | "c">;
            type Omitted = Omit<Base, "b">;
        """))
        assert resolver.resolve_name("Picked") == ["a", "c"]
        assert resolver.resolve_name("Omitted") == ["a", "c"]

    def test_user_generic_resolves_base_name(self, parse):
        resolver = TypeResolver(parse("""\
            interface ListProps<T> { items: T[]; render: (item: T) => string }
            type Props = ListProps<string>;
        """))
        assert resolver.resolve_name("Props") == ["items", "render"]
