"""Declaration lookups for each supported language."""

from __future__ import annotations

from apidocgen.finder import TypeFinder
from apidocgen.finder.languages import GO, JAVA, JAVASCRIPT, KOTLIN, PYTHON, TYPESCRIPT


def test_kotlin_finds_class_on_first_line(source_tree) -> None:
    source_tree.write({"User.kt": "class User(val name: String)\n"})

    location = TypeFinder(KOTLIN).find_by_name(source_tree.file("User.kt"), "User")

    assert location is not None
    assert location.class_name == "User"
    assert location.line_number == 1
    assert "class User" in location.source_code


def test_kotlin_returns_declaration_and_imports(source_tree) -> None:
    source_tree.write(
        {
            "OrderDetail.kt": """
            package com.example.dto

            import java.time.LocalDateTime
            import com.example.domain.OrderStatus

            data class OrderDetail(
                val orderId: Long,
                val status: OrderStatus,
                val createdAt: LocalDateTime
            )

            enum class Currency { KRW, USD }
            """
        }
    )
    finder = TypeFinder(KOTLIN)

    detail = finder.find_by_name(source_tree.file("OrderDetail.kt"), "OrderDetail")
    currency = finder.find_by_name(source_tree.file("OrderDetail.kt"), "Currency")

    assert detail is not None
    assert detail.line_number == 6
    assert detail.source_code.startswith("data class OrderDetail(")
    assert detail.source_code.rstrip().endswith(")")
    joined = "\n".join(detail.imports)
    assert "import java.time.LocalDateTime" in joined
    assert "import com.example.domain.OrderStatus" in joined
    assert currency is not None
    assert currency.line_number == 12
    assert "KRW" in currency.source_code


def test_java_finds_class_and_record(source_tree) -> None:
    source_tree.write(
        {
            "UserDto.java": """
            package com.example;

            import java.util.List;

            public class UserDto {
                private List<String> roles;
            }

            record Point(int x, int y) {}
            """
        }
    )
    finder = TypeFinder(JAVA)

    dto = finder.find_by_name(source_tree.file("UserDto.java"), "UserDto")
    point = finder.find_by_name(source_tree.file("UserDto.java"), "Point")

    assert dto is not None
    assert dto.line_number == 5
    assert dto.source_code.startswith("public class UserDto")
    assert dto.imports == ("import java.util.List;",)
    assert point is not None
    assert point.line_number == 9
    assert point.source_code == "record Point(int x, int y) {}"


def test_typescript_finds_exported_interface_and_alias(source_tree) -> None:
    source_tree.write(
        {
            "user.ts": """
            import { Role } from './role';

            export interface UserResponse {
              id: number;
              role: Role;
            }

            export type UserId = string;

            export abstract class BaseEntity {
              id: number;
            }
            """
        }
    )
    finder = TypeFinder(TYPESCRIPT)

    response = finder.find_by_name(source_tree.file("user.ts"), "UserResponse")
    alias = finder.find_by_name(source_tree.file("user.ts"), "UserId")
    base = finder.find_by_name(source_tree.file("user.ts"), "BaseEntity")

    assert response is not None
    assert response.line_number == 3
    assert response.source_code.startswith("interface UserResponse")
    assert response.imports == ("import { Role } from './role';",)
    assert alias is not None
    assert alias.line_number == 8
    assert alias.source_code.startswith("type UserId = string")
    assert base is not None
    assert base.line_number == 10
    assert base.source_code.startswith("abstract class BaseEntity")


def test_javascript_finds_class_and_function(source_tree) -> None:
    source_tree.write(
        {
            "service.js": """
            import express from 'express';

            class UserService {
              find() {
                return [];
              }
            }

            function helper() {
              return 1;
            }
            """
        }
    )
    finder = TypeFinder(JAVASCRIPT)

    service = finder.find_by_name(source_tree.file("service.js"), "UserService")
    helper = finder.find_by_name(source_tree.file("service.js"), "helper")
    method = finder.find_by_name(source_tree.file("service.js"), "find")

    assert service is not None
    assert service.line_number == 3
    assert service.source_code.startswith("class UserService")
    assert service.imports == ("import express from 'express';",)
    assert helper is not None
    assert helper.line_number == 9
    assert method is None


def test_python_reports_class_line_of_decorated_class(source_tree) -> None:
    source_tree.write(
        {
            "models.py": """
            from dataclasses import dataclass
            import typing


            @dataclass
            class User:
                name: str


            class Plain:
                pass
            """
        }
    )
    finder = TypeFinder(PYTHON)

    user = finder.find_by_name(source_tree.file("models.py"), "User")
    plain = finder.find_by_name(source_tree.file("models.py"), "Plain")

    assert user is not None
    assert user.line_number == 6
    assert user.source_code.startswith("class User:")
    assert user.imports == ("from dataclasses import dataclass", "import typing")
    assert plain is not None
    assert plain.line_number == 10
    assert plain.source_code.startswith("class Plain:")


def test_go_matches_type_declaration_and_function(source_tree) -> None:
    source_tree.write(
        {
            "user.go": """
            package dto

            import "time"

            type User struct {
            	Name    string
            	Created time.Time
            }

            func NewUser() *User {
            	return nil
            }
            """
        }
    )
    finder = TypeFinder(GO)

    user = finder.find_by_name(source_tree.file("user.go"), "User")
    constructor = finder.find_by_name(source_tree.file("user.go"), "NewUser")

    assert user is not None
    assert user.line_number == 5
    assert user.source_code.startswith("User struct {")
    assert user.imports == ('import "time"',)
    assert constructor is not None
    assert constructor.line_number == 10


def test_missing_declaration_returns_none(source_tree) -> None:
    source_tree.write({"User.kt": "class User(val name: String)\n"})

    assert TypeFinder(KOTLIN).find_by_name(source_tree.file("User.kt"), "Nope") is None


def test_go_grouped_types_are_sliced_individually(source_tree) -> None:
    source_tree.write(
        {
            "types.go": """
            package dto

            type (
            	Account struct{}
            	Balance int
            )
            """
        }
    )
    finder = TypeFinder(GO)

    account = finder.find_by_name(source_tree.file("types.go"), "Account")
    balance = finder.find_by_name(source_tree.file("types.go"), "Balance")

    assert account is not None
    assert account.line_number == 4
    assert account.source_code == "Account struct{}"
    assert balance is not None
    assert balance.line_number == 5
    assert balance.source_code == "Balance int"
