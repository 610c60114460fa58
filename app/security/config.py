from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError

from app.models.security import ROLE_ADMIN, ROLE_SUPER_ADMIN, ROLE_USER
from app.security.roles import RoleHierarchy, RoleHierarchyError
from app.security.scoping import AccessPolicy, JwtRole


class SecurityConfigError(ValueError):
    """Raised when the security YAML is missing or invalid."""


class AuthConfig(BaseModel):
    authorization_header: str = "Authorization"
    bearer_prefix: str = "Bearer"


class AccessConfig(BaseModel):
    jwt_role: JwtRole = JwtRole.IS_AUTHENTICATED_FULLY
    admin_roles: list[str] = Field(default_factory=lambda: [ROLE_SUPER_ADMIN, ROLE_ADMIN])


class DefaultRule(BaseModel):
    auth_required: bool = True
    required_roles: list[str] = Field(default_factory=list)


class RouteRule(BaseModel):
    path: str
    methods: list[str] = Field(default_factory=lambda: ["GET"])

    auth_required: bool | None = None
    required_roles: list[str] = Field(default_factory=list)

    def normalized_methods(self) -> set[str]:
        return {m.upper() for m in self.methods}


def _default_role_hierarchy() -> dict[str, list[str]]:
    return {ROLE_ADMIN: [ROLE_USER], ROLE_SUPER_ADMIN: [ROLE_ADMIN]}


class SecurityConfigModel(BaseModel):
    auth: AuthConfig = Field(default_factory=AuthConfig)
    access: AccessConfig = Field(default_factory=AccessConfig)
    role_hierarchy: dict[str, list[str]] = Field(default_factory=_default_role_hierarchy)
    default: DefaultRule = Field(default_factory=DefaultRule)
    routes: list[RouteRule] = Field(default_factory=list)


@dataclass(frozen=True)
class EffectiveRule:
    """
    Fully-resolved rule (defaults applied) for a particular request.
    """

    auth_required: bool
    required_roles: frozenset[str]


def _path_template_to_regex(path_template: str) -> re.Pattern[str]:
    # Convert "/api/v1/events/{id}" -> r"^/api/v1/events/[^/]+$"
    regex = re.sub(r"\{[^/]+\}", r"[^/]+", path_template)
    return re.compile(rf"^{regex}$")


class SecurityConfig:
    """
    Runtime helper around validated config: route matching, access policy
    and role hierarchy.
    """

    def __init__(self, model: SecurityConfigModel, jwt_role_override: JwtRole | None = None):
        self.model = model

        self._exact_rules: dict[str, list[RouteRule]] = {}
        for r in self.model.routes:
            self._exact_rules.setdefault(r.path, []).append(r)
        self._compiled_rules = [(rule.path, _path_template_to_regex(rule.path), rule) for rule in self.model.routes]

        try:
            self._role_hierarchy = RoleHierarchy(self.model.role_hierarchy)
        except RoleHierarchyError as exc:
            raise SecurityConfigError(str(exc)) from exc

        self._access_policy = AccessPolicy(
            jwt_role=jwt_role_override or self.model.access.jwt_role,
            admin_roles=frozenset(self.model.access.admin_roles),
        )

    @property
    def auth(self) -> AuthConfig:
        return self.model.auth

    @property
    def access_policy(self) -> AccessPolicy:
        return self._access_policy

    @property
    def role_hierarchy(self) -> RoleHierarchy:
        return self._role_hierarchy

    def match(self, path: str, method: str) -> EffectiveRule:
        """
        Find the best matching rule for (path, method), then apply defaults.
        """

        method = method.upper()
        default = self.model.default

        # 1) exact path match
        for candidate in self._exact_rules.get(path, []):
            if method in candidate.normalized_methods():
                return _effective(candidate, default)

        # 2) template match
        for _template, regex, candidate in self._compiled_rules:
            if method not in candidate.normalized_methods():
                continue
            if regex.match(path):
                return _effective(candidate, default)

        # 3) no match -> defaults
        return EffectiveRule(
            auth_required=default.auth_required,
            required_roles=frozenset(default.required_roles),
        )


def _effective(rule: RouteRule, default: DefaultRule) -> EffectiveRule:
    # A rule that requires roles is auth-required even if the default is "public".
    inferred_auth_required = default.auth_required or bool(rule.required_roles)

    return EffectiveRule(
        auth_required=inferred_auth_required if rule.auth_required is None else rule.auth_required,
        required_roles=frozenset(rule.required_roles or default.required_roles),
    )


def load_security_config(path: Path, jwt_role_override: str | None = None) -> SecurityConfig:
    try:
        raw_text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SecurityConfigError(f"Cannot read security config {path}: {exc}") from exc

    raw: dict[str, Any] = yaml.safe_load(raw_text) or {}

    if "security" not in raw:
        raise SecurityConfigError(f"Missing top-level 'security' key in config: {path}")

    try:
        model = SecurityConfigModel.model_validate(raw["security"])
        override = JwtRole(jwt_role_override) if jwt_role_override else None
    except (ValidationError, ValueError) as exc:
        raise SecurityConfigError(f"Invalid security config {path}: {exc}") from exc

    return SecurityConfig(model, jwt_role_override=override)
