# opensearch_sugar/http.py

from opensearchpy import OpenSearch


ML_BASE = "/_plugins/_ml"


class MLHttp:
    """
    Raw REST access to the ML Commons plugin and the ingest API.
    Every call goes through `client.transport.perform_request` and returns the parsed JSON body.
    """

    def __init__(self, client: OpenSearch):
        self.client = client

    def request(self, method, url, body=None, params=None):
        return self.client.transport.perform_request(
            method=method,
            url=url,
            params=params,
            body=body
        )

    def get(self, url, body=None, params=None):
        return self.request("GET", url, body=body, params=params)

    def post(self, url, body=None, params=None):
        return self.request("POST", url, body=body, params=params)

    def put(self, url, body=None, params=None):
        return self.request("PUT", url, body=body, params=params)

    def delete(self, url, params=None):
        return self.request("DELETE", url, params=params)

    # ML Commons endpoints

    def search_models(self, query: dict) -> dict:
        return self.get(f"{ML_BASE}/models/_search", body={"query": query})

    def register_model(self, config: dict, deploy: bool = True) -> dict:
        params = {"deploy": "true"} if deploy else None
        return self.post(f"{ML_BASE}/models/_register", body=config, params=params)

    def deploy_model(self, model_id: str) -> dict:
        return self.post(f"{ML_BASE}/models/{model_id}/_deploy")

    def undeploy_model(self, model_id: str) -> dict:
        return self.post(f"{ML_BASE}/models/{model_id}/_undeploy")

    def delete_model(self, model_id: str) -> dict:
        return self.delete(f"{ML_BASE}/models/{model_id}")

    def model_stats(self, model_id: str) -> dict:
        return self.get(f"{ML_BASE}/models/{model_id}/_stats")

    def get_task(self, task_id: str) -> dict:
        return self.get(f"{ML_BASE}/tasks/{task_id}")

    def put_pipeline(self, name: str, payload: dict) -> dict:
        return self.put(f"/_ingest/pipeline/{name}", body=payload)
