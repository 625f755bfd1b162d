"""
Tests for the React and Express source generators.
"""

import pytest

from tibr.generation import (
    render_controller,
    render_form,
    render_route_stub,
    render_service,
    write_form,
    write_page,
    write_route_stub,
    write_service,
)
from tibr.generation.naming import class_name, field_label, plural_route
from tibr.generation.react import ts_type_for
from tibr.schema import PropertySchema, parse_entity_schema


class TestNaming:

    @pytest.mark.parametrize("name,expected", [
        ("user", "User"),
        ("User", "User"),
        ("orderItem", "OrderItem"),
    ])
    def test_class_name(self, name, expected):
        assert class_name(name) == expected

    def test_plural_route(self):
        assert plural_route("OrderItem") == "orderitems"

    @pytest.mark.parametrize("field,label", [
        ("firstName", "First Name"),
        ("age", "Age"),
        ("createdAtUtc", "Created At Utc"),
    ])
    def test_field_label(self, field, label):
        assert field_label(field) == label


class TestReactForm:

    def test_form_values_interface(self, user_entity):
        content = render_form(user_entity)

        assert "export interface UserFormValues {" in content
        assert "  id: string;" in content
        assert "  role: 'admin' | 'member';" in content
        assert "  age: number;" in content

    def test_form_fields(self, user_entity):
        content = render_form(user_entity)

        assert "export const UserForm: React.FC<{" in content
        assert "useForm<UserFormValues>()" in content
        assert "{...register('age', { required: true })}" in content
        assert "{errors.role && <span>Role is required</span>}" in content
        assert content.count('<div className="form-field">') == 3

    @pytest.mark.parametrize("json_type,ts_type", [
        ("object", "Record<string, unknown>"),
        ("array", "unknown[]"),
        ("boolean", "boolean"),
        ("mystery", "string"),
    ])
    def test_ts_types(self, json_type, ts_type):
        assert ts_type_for(PropertySchema(name="x", type=json_type)) == ts_type

    def test_write_form(self, tmp_path, user_entity):
        ui_dir = tmp_path / "libs" / "shared-ui" / "src" / "lib"
        path = write_form(user_entity, ui_dir)

        assert path == ui_dir / "UserForm.tsx"
        assert path.read_text() == render_form(user_entity)


class TestReactPages:

    def test_list_page(self, tmp_path):
        path = write_page("user", "list", tmp_path)
        content = path.read_text()

        assert path.name == "UserList.tsx"
        assert "import { UserFormValues } from './UserForm';" in content
        assert "fetch('/api/users')" in content
        assert "<h1>User List</h1>" in content

    def test_detail_page(self, tmp_path):
        path = write_page("User", "detail", tmp_path)
        content = path.read_text()

        assert path.name == "UserDetail.tsx"
        assert "useParams<{ id: string }>()" in content
        assert "fetch('/api/users/' + id)" in content

    def test_unknown_page_type(self, tmp_path):
        with pytest.raises(ValueError):
            write_page("User", "grid", tmp_path)


class TestExpress:

    def test_service(self):
        content = render_service("User")

        assert "export class UserService {" in content
        assert "'http://localhost:3000/users'" in content
        assert "fetch(`${this.baseUrl}?id=eq.${id}`)" in content

    def test_controller(self):
        content = render_controller("User")

        assert "import { UserService } from './user.service';" in content
        assert "router.delete('/:id'" in content
        assert content.rstrip().endswith("export default router;")

    def test_write_service(self, tmp_path):
        service_path, controller_path = write_service("User", tmp_path)
        base = tmp_path / "apps" / "api" / "src" / "app" / "user"

        assert service_path == base / "user.service.ts"
        assert controller_path == base / "user.controller.ts"
        assert service_path.read_text() == render_service("User")

    def test_route_stub(self, tmp_path):
        path = write_route_stub("Health", tmp_path)

        assert path == tmp_path / "apps" / "api" / "src" / "app" / "health.ts"
        assert "router.get('/health'" in path.read_text()
        assert "message: 'Health endpoint'" in render_route_stub("Health")

    def test_form_and_schema_round_trip_names(self):
        entity = parse_entity_schema("invoice", {"properties": {"amountDue": {"type": "number"}}})
        content = render_form(entity)
        assert "export const InvoiceForm" in content
        assert '<label htmlFor="amountDue">Amount Due</label>' in content
