"""
HTTP tests through FastAPI's TestClient with the store and model faked.
"""
from fastapi.testclient import TestClient

import main
from tests.conftest import model_reply


def _chat(client, message, conversation="web"):
    return client.post("/chat", json={"message": message, "conversation": conversation})


class TestHealth:
    def test_health(self, client):
        r = client.get("/health")
        assert r.status_code == 200
        assert r.json()["status"] == "online"


class TestChatEndpoint:
    def test_expense_turn_creates_transaction(self, client, fake_model):
        fake_model.responses.append(
            model_reply(
                "Registrado, Senhor.",
                "ADD_TRANSACTION",
                {"description": "iFood", "amount": 50, "type": "EXPENSE"},
            )
        )

        r = _chat(client, "Gastei 50 reais no ifood hoje")

        assert r.status_code == 200
        data = r.json()
        assert data["action"]["type"] == "ADD_TRANSACTION"
        assert data["dispatch"]["status"] == "created"

        transactions = client.get("/transactions").json()
        assert len(transactions) == 1
        assert transactions[0]["amount"] == 50
        assert transactions[0]["category"] == "Geral"

    def test_transcript_appended(self, client, fake_model):
        fake_model.responses.append(model_reply("Olá, Senhor. Às ordens."))

        _chat(client, "Olá, como você está?")

        messages = client.get("/chat/messages").json()
        assert [(m["sender"], m["text"]) for m in messages] == [
            ("user", "Olá, como você está?"),
            ("alfred", "Olá, Senhor. Às ordens."),
        ]

    def test_conversations_kept_apart(self, client, fake_model):
        fake_model.responses += [model_reply("Um."), model_reply("Dois.")]

        _chat(client, "primeira", conversation="web")
        _chat(client, "segunda", conversation="telegram:42")

        assert len(client.get("/chat/messages").json()) == 2
        other = client.get("/chat/messages", params={"conversation": "telegram:42"}).json()
        assert other[0]["text"] == "segunda"

    def test_model_failure_still_replies(self, client, fake_model):
        fake_model.responses.append("isto não é json")

        r = _chat(client, "Gastei 50 reais")

        assert r.status_code == 200
        data = r.json()
        assert data["reply"]
        assert data["action"]["type"] == "NONE"
        assert data["dispatch"]["status"] == "skipped"
        assert client.get("/transactions").json() == []

    def test_rejected_action_keeps_reply(self, client, fake_model):
        fake_model.responses.append(
            model_reply("Agendado, Senhor.", "ADD_TASK", {"title": "Dentista"})
        )

        data = _chat(client, "Marca dentista").json()

        assert data["reply"] == "Agendado, Senhor."
        assert data["dispatch"]["status"] == "rejected"
        assert client.get("/tasks").json() == []
        texts = [m["text"] for m in client.get("/chat/messages").json()]
        assert texts == ["Marca dentista", "Agendado, Senhor."]

    def test_list_clarification_appended(self, client, fake_model):
        client.post("/lists", json={"name": "Mercado"})
        fake_model.responses.append(
            model_reply("Certamente.", "ADD_LIST_ITEM", {"list_id": None, "name": "Pilhas"})
        )

        data = _chat(client, "Preciso comprar pilhas").json()

        assert data["dispatch"]["status"] == "needs_clarification"
        assert "Mercado" in data["follow_up"]
        messages = client.get("/chat/messages").json()
        assert messages[-1]["text"] == data["follow_up"]

    def test_context_snapshot_sent_to_model(self, client, fake_model):
        client.post("/lists", json={"name": "Mercado"})
        for day in range(1, 8):
            client.post("/tasks", json={"title": f"Tarefa {day}", "date": f"2026-10-{day:02d}"})
        fake_model.responses.append(model_reply("Ok."))

        _chat(client, "o que tenho?")

        _, context_prompt = fake_model.calls[0]
        assert "Tarefa 7" in context_prompt
        assert "Tarefa 2" not in context_prompt
        assert "Mercado" in context_prompt

    def test_blank_message_rejected(self, client):
        assert _chat(client, "   ").status_code == 422


class TestTransactions:
    def test_create_and_summary(self, client):
        client.post("/transactions", json={"description": "Salário", "amount": 5000, "type": "INCOME", "category": "Salário", "date": "2026-10-05T09:00:00"})
        client.post("/transactions", json={"description": "Aluguel", "amount": 1500, "category": "Moradia", "date": "2026-10-06T09:00:00"})
        client.post("/transactions", json={"description": "CDB", "amount": 500, "type": "investment", "category": "Investimentos", "date": "2026-10-07T09:00:00"})

        summary = client.get("/transactions/summary").json()
        assert summary == {"income": 5000, "expense": 1500, "investment": 500, "balance": 3000}

        listed = client.get("/transactions").json()
        assert [t["description"] for t in listed] == ["CDB", "Aluguel", "Salário"]

    def test_invalid_amount_422(self, client):
        r = client.post("/transactions", json={"description": "x", "amount": 0, "category": "Geral", "date": "2026-10-05T09:00:00"})
        assert r.status_code == 422

    def test_delete_missing_404(self, client):
        assert client.delete("/transactions/99").status_code == 404


class TestTasks:
    def test_toggle_and_filter(self, client):
        task = client.post("/tasks", json={"title": "Pagar boleto", "date": "2026-10-20"}).json()
        assert task["status"] == "PENDING"

        toggled = client.post(f"/tasks/{task['id']}/toggle").json()
        assert toggled["status"] == "DONE"
        assert client.get("/tasks", params={"status": "PENDING"}).json() == []

        client.post(f"/tasks/{task['id']}/toggle")
        assert len(client.get("/tasks", params={"status": "PENDING"}).json()) == 1

    def test_patch(self, client):
        task = client.post("/tasks", json={"title": "Pagar boleto", "date": "2026-10-20"}).json()
        updated = client.patch(f"/tasks/{task['id']}", json={"priority": "high", "time": "10:00"}).json()
        assert updated["priority"] == "high"
        assert updated["time"] == "10:00"
        assert updated["title"] == "Pagar boleto"

    def test_patch_normalizes_and_validates(self, client):
        task = client.post("/tasks", json={"title": "Pagar boleto", "date": "2026-10-20"}).json()

        assert client.patch(f"/tasks/{task['id']}", json={"title": ""}).status_code == 422
        updated = client.patch(f"/tasks/{task['id']}", json={"priority": " HIGH "}).json()
        assert updated["priority"] == "high"
        assert updated["title"] == "Pagar boleto"

    def test_missing_task_404(self, client):
        assert client.get("/tasks/42").status_code == 404
        assert client.post("/tasks/42/toggle").status_code == 404


class TestLists:
    def test_items_lifecycle(self, client):
        group = client.post("/lists", json={"name": "Mercado"}).json()
        item = client.post(f"/lists/{group['id']}/items", json={"name": "Arroz", "quantity": 2}).json()
        assert item["status"] == "PENDING"

        assert client.post(f"/items/{item['id']}/toggle").json()["status"] == "DONE"
        assert client.delete(f"/items/{item['id']}").status_code == 200
        assert client.get("/lists").json()[0]["items"] == []

    def test_item_on_missing_list_404(self, client):
        assert client.post("/lists/7/items", json={"name": "Arroz"}).status_code == 404


class TestProjects:
    def test_contributions_complete_and_floor_at_zero(self, client):
        project = client.post("/projects", json={"title": "Celular", "target_amount": 1000, "category": "asset"}).json()
        assert project["category"] == "ASSET"

        done = client.post(f"/projects/{project['id']}/contributions", json={"amount": 1200}).json()
        assert done["current_amount"] == 1200
        assert done["status"] == "COMPLETED"

        back = client.post(f"/projects/{project['id']}/contributions", json={"amount": 5000, "withdraw": True}).json()
        assert back["current_amount"] == 0
        assert back["status"] == "ACTIVE"


class TestAdminConfig:
    def test_ai_key_roundtrip_is_not_echoed(self, client):
        r = client.put("/admin/config/ai-key", json={"api_key": "sk-secret"})
        assert r.status_code == 200
        assert r.json()["ai_key_configured"] is True
        assert r.json()["source"] == "admin"
        assert "sk-secret" not in r.text

        cleared = client.delete("/admin/config/ai-key").json()
        assert cleared["source"] != "admin"


class TestLifespan:
    def test_starts_without_bot_token(self, monkeypatch):
        monkeypatch.setattr(main.settings, "telegram_bot_token", "")
        with TestClient(main.app) as c:
            assert c.get("/health").status_code == 200
            assert getattr(main.app.state, "bot", None) is None
