import pprint
from typing import Any, Dict, Optional

from jinja2 import DictLoader, Environment, StrictUndefined

from ..utils import to_camel_case, to_kebab_case, to_pascal_case
from .typescript import quote


class Templates:
    """Шаблоны для генерации файлов"""

    type_module = """{% for dep in imports %}
import type { {{ dep.name }} } from './{{ dep.module }}';
{% endfor %}
{% if imports %}

{% endif %}
{% if description %}
/** {{ description }} */
{% endif %}
{% if fields is not none %}
export interface {{ name }} {
{% for field in fields %}
  {{ field.key }}{% if field.optional %}?{% endif %}: {{ field.type }};
{% endfor %}
}
{% elif enum_members %}
export enum {{ name }} {
{% for member in enum_members %}
  {{ member.key }} = {{ member.value }},
{% endfor %}
}
{% else %}
export type {{ name }} = {{ alias }};
{% endif %}
"""

    barrel = """{% for module in modules %}
export * from './{{ module }}';
{% endfor %}
"""

    validator_module = """import { z } from 'zod';
{% if native_enum %}
import { {{ name }} } from '{{ type_path }}';
{% else %}
import type { {{ name }} } from '{{ type_path }}';
{% endif %}
{% for dep in imports %}
import { {{ dep.name }}Schema } from './{{ dep.module }}.schema';
{% endfor %}

{% if fields %}
export const {{ name }}Schema: z.ZodType<{{ name }}> = z.object({
{% for field in fields %}
  {{ field }},
{% endfor %}
}){{ suffix }};
{% else %}
export const {{ name }}Schema: z.ZodType<{{ name }}> = {{ expression }};
{% endif %}

export function is{{ name }}(value: unknown): value is {{ name }} {
  return {{ name }}Schema.safeParse(value).success;
}
"""

    api_client = """export type ApiSuccess<T> = { status: 'success'; data: T };
export type ApiFailure = { status: 'error'; error: string; statusCode?: number };
export type ApiResult<T> = ApiSuccess<T> | ApiFailure;

export interface HttpTransport {
  get<T>(url: string): Promise<T>;
  post<T>(url: string, body?: unknown): Promise<T>;
  put<T>(url: string, body?: unknown): Promise<T>;
  patch<T>(url: string, body?: unknown): Promise<T>;
  delete<T>(url: string): Promise<T>;
}

export class HttpError extends Error {
  constructor(message: string, public readonly statusCode: number) {
    super(message);
    this.name = 'HttpError';
  }
}

export type QueryValue =
  | string
  | number
  | boolean
  | null
  | undefined
  | Array<string | number | boolean>;

export function buildUrl(path: string, query: Record<string, QueryValue> = {}): string {
  const params = new URLSearchParams();
  for (const [key, value] of Object.entries(query)) {
    if (value === undefined || value === null) {
      continue;
    }
    if (Array.isArray(value)) {
      value.forEach((item) => params.append(key, String(item)));
    } else {
      params.append(key, String(value));
    }
  }
  const search = params.toString();
  return search ? `${path}?${search}` : path;
}

export function toFailure(error: unknown): ApiFailure {
  if (error instanceof HttpError) {
    return { status: 'error', error: error.message, statusCode: error.statusCode };
  }
  return { status: 'error', error: error instanceof Error ? error.message : String(error) };
}

export function unwrapResult<T>(result: ApiResult<T>): T {
  if (result.status === 'error') {
    throw new HttpError(result.error, result.statusCode ?? 0);
  }
  return result.data;
}

function unwrapEnvelope(payload: unknown): unknown {
  if (payload && typeof payload === 'object' && 'success' in payload && 'data' in payload) {
    return (payload as { data: unknown }).data;
  }
  return payload;
}

export function createFetchTransport(baseUrl = {{ base_url }}, init: RequestInit = {}): HttpTransport {
  async function request<T>(method: string, url: string, body?: unknown): Promise<T> {
    const response = await fetch(baseUrl + url, {
      ...init,
      method,
      headers: { 'Content-Type': 'application/json', ...(init.headers as Record<string, string> | undefined) },
      body: body === undefined ? undefined : JSON.stringify(body),
    });
    const text = await response.text();
    const payload: unknown = text ? JSON.parse(text) : undefined;
    if (!response.ok) {
      const message =
        payload && typeof payload === 'object' && 'message' in payload
          ? String((payload as { message: unknown }).message)
          : `Request failed with status ${response.status}`;
      throw new HttpError(message, response.status);
    }
    return unwrapEnvelope(payload) as T;
  }

  return {
    get: <T>(url: string) => request<T>('GET', url),
    post: <T>(url: string, body?: unknown) => request<T>('POST', url, body),
    put: <T>(url: string, body?: unknown) => request<T>('PUT', url, body),
    patch: <T>(url: string, body?: unknown) => request<T>('PATCH', url, body),
    delete: <T>(url: string) => request<T>('DELETE', url),
  };
}

export const defaultTransport: HttpTransport = createFetchTransport();
"""

    service_module = """import { buildUrl, defaultTransport, toFailure } from './api-client';
import type { ApiResult, HttpTransport } from './api-client';
{% if type_imports %}
import type { {{ type_imports | join(', ') }} } from '{{ types_path }}';
{% endif %}

/**
 * {{ title }}
 */
export class {{ class_name }} {
  constructor(private readonly transport: HttpTransport = defaultTransport) {}
{% for method in methods %}

{% if method.summary %}
  /** {{ method.summary }} */
{% endif %}
  async {{ method.name }}({{ method.parameters }}): Promise<ApiResult<{{ method.response_type }}>> {
    try {
      const url = buildUrl(`{{ method.url }}`{% if method.query %}, { {{ method.query }} }{% endif %});
      const data = await this.transport.{{ method.call }}<{{ method.response_type }}>(url{% if method.body %}, {{ method.body }}{% endif %});
      return { status: 'success', data };
    } catch (error) {
      return toFailure(error);
    }
  }
{% endfor %}
}

export const {{ instance_name }} = new {{ class_name }}();
"""

    hook_options = """export interface QueryHookOptions {
  enabled?: boolean;
}

export interface MutationHookOptions<T> {
  onSuccess?: (data: T) => void;
  onError?: (error: Error) => void;
}
"""

    hook_module = """import { useMutation, useQuery, useQueryClient } from '{{ query_module }}';
import { unwrapResult } from '{{ api_client_path }}';
import { {{ service_instance }} } from '{{ service_path }}';
import type { MutationHookOptions, QueryHookOptions } from './hook-options';
{% if type_imports %}
import type { {{ type_imports | join(', ') }} } from '{{ types_path }}';
{% endif %}

export const {{ key_const }} = '{{ resource }}';
{% for hook in hooks %}

{% if hook.is_query %}
export function {{ hook.name }}({{ hook.parameters }}) {
  return useQuery({
    queryKey: [{{ key_const }}, '{{ hook.method }}'{% for arg in hook.key_args %}, {{ arg }}{% endfor %}],
    queryFn: async () => unwrapResult(await {{ service_instance }}.{{ hook.method }}({{ hook.call_args }})),
    enabled: options.enabled ?? true,
  });
}
{% else %}
export function {{ hook.name }}(options: MutationHookOptions<{{ hook.response_type }}> = {}) {
  const queryClient = useQueryClient();
  return useMutation({
    mutationFn: async ({% if hook.variables_type %}variables: {{ hook.variables_type }}{% endif %}) =>
      unwrapResult(await {{ service_instance }}.{{ hook.method }}({{ hook.call_args }})),
    onSuccess: (data: {{ hook.response_type }}) => {
      queryClient.invalidateQueries({ queryKey: [{{ key_const }}] });
      options.onSuccess?.(data);
    },
    onError: (error: Error) => {
      options.onError?.(error);
    },
  });
}
{% endif %}
{% endfor %}
"""

    query_cache = """import { useCallback, useEffect, useRef, useState } from 'react';

export type QueryKey = ReadonlyArray<unknown>;

interface CacheEntry {
  data?: unknown;
  error?: Error;
  stale: boolean;
  listeners: Set<() => void>;
}

const cache = new Map<string, CacheEntry>();

function entryFor(hash: string): CacheEntry {
  let entry = cache.get(hash);
  if (!entry) {
    entry = { stale: true, listeners: new Set() };
    cache.set(hash, entry);
  }
  return entry;
}

function notify(entry: CacheEntry): void {
  entry.listeners.forEach((listener) => listener());
}

export interface QueryClient {
  invalidateQueries(filter: { queryKey: QueryKey }): void;
}

const queryClient: QueryClient = {
  invalidateQueries(filter: { queryKey: QueryKey }) {
    const prefix = JSON.stringify(filter.queryKey).slice(0, -1);
    cache.forEach((entry, hash) => {
      if (hash === prefix + ']' || hash.startsWith(prefix + ',')) {
        entry.stale = true;
        notify(entry);
      }
    });
  },
};

export function useQueryClient(): QueryClient {
  return queryClient;
}

export interface QueryOptions<T> {
  queryKey: QueryKey;
  queryFn: () => Promise<T>;
  enabled?: boolean;
}

export function useQuery<T>(options: QueryOptions<T>) {
  const hash = JSON.stringify(options.queryKey);
  const enabled = options.enabled ?? true;
  const [, forceRender] = useState(0);
  const [isLoading, setLoading] = useState(false);
  const queryFn = useRef(options.queryFn);
  queryFn.current = options.queryFn;

  const refetch = useCallback(async () => {
    const entry = entryFor(hash);
    entry.stale = false;
    setLoading(true);
    try {
      entry.data = await queryFn.current();
      entry.error = undefined;
    } catch (caught) {
      entry.error = caught instanceof Error ? caught : new Error(String(caught));
    } finally {
      setLoading(false);
      notify(entry);
    }
  }, [hash]);

  useEffect(() => {
    if (!enabled) {
      return undefined;
    }
    const entry = entryFor(hash);
    const listener = () => {
      forceRender((count) => count + 1);
      if (entry.stale) {
        void refetch();
      }
    };
    entry.listeners.add(listener);
    if (entry.stale) {
      void refetch();
    }
    return () => {
      entry.listeners.delete(listener);
    };
  }, [hash, enabled, refetch]);

  const entry = entryFor(hash);
  return {
    data: entry.data as T | undefined,
    error: entry.error ?? null,
    isLoading,
    refetch,
  };
}

export interface MutationOptions<T, V> {
  mutationFn: (variables: V) => Promise<T>;
  onSuccess?: (data: T) => void;
  onError?: (error: Error) => void;
}

export function useMutation<T, V = void>(options: MutationOptions<T, V>) {
  const [isPending, setPending] = useState(false);
  const [error, setError] = useState<Error | null>(null);
  const [data, setData] = useState<T | undefined>(undefined);
  const latest = useRef(options);
  latest.current = options;

  const mutateAsync = useCallback(async (variables: V) => {
    setPending(true);
    setError(null);
    try {
      const result = await latest.current.mutationFn(variables);
      setData(result);
      latest.current.onSuccess?.(result);
      return result;
    } catch (caught) {
      const failure = caught instanceof Error ? caught : new Error(String(caught));
      setError(failure);
      latest.current.onError?.(failure);
      throw failure;
    } finally {
      setPending(false);
    }
  }, []);

  const mutate = useCallback(
    (variables: V) => {
      mutateAsync(variables).catch(() => undefined);
    },
    [mutateAsync],
  );

  return { mutate, mutateAsync, data, error, isPending };
}
"""

    view_module = """import type { {{ name }} } from '{{ type_path }}';
import { {{ name }}Schema } from '{{ schema_path }}';
{% if type_imports %}
import type { {{ type_imports | join(', ') }} } from '{{ types_path }}';
{% endif %}

export class {{ name }}View {
  private readonly source: Partial<{{ name }}>;

  constructor(data?: Partial<{{ name }}> | null) {
    this.source = data ?? {};
  }
{% for getter in getters %}

  get {{ getter.key }}(): {{ getter.type }} {
    return this.source{{ getter.access }} ?? {{ getter.default }};
  }
{% endfor %}

  isValid(): boolean {
    return {{ name }}Schema.safeParse(this.source).success;
  }

  toJSON(): Partial<{{ name }}> {
    return { ...this.source };
  }

  toApiPayload(): {{ name }} {
    return { ...this.source } as {{ name }};
  }
}
"""

    list_component = """import React from 'react';
import type { {{ name }} } from '{{ type_path }}';

export interface {{ name }}ListProps {
  items: {{ name }}[];
  onEdit?: (item: {{ name }}) => void;
  onDelete?: (item: {{ name }}) => void;
  onView?: (item: {{ name }}) => void;
  page?: number;
  pageCount?: number;
  onPageChange?: (page: number) => void;
}

function formatValue(value: unknown): string {
  if (value === null || value === undefined) {
    return '';
  }
  if (typeof value === 'object') {
    return JSON.stringify(value);
  }
  return String(value);
}

export function {{ name }}List({
  items,
  onEdit,
  onDelete,
  onView,
  page = 1,
  pageCount,
  onPageChange,
}: {{ name }}ListProps) {
  const hasActions = Boolean(onEdit || onDelete || onView);

  return (
    <div className="{{ css }}-list">
      <table>
        <thead>
          <tr>
{% for column in columns %}
            <th>{{ column.label }}</th>
{% endfor %}
            {hasActions && <th>Actions</th>}
          </tr>
        </thead>
        <tbody>
          {items.length === 0 && (
            <tr>
              <td colSpan={{ '{' }}{{ columns | length + 1 }}{{ '}' }}>No records</td>
            </tr>
          )}
          {items.map((item, index) => (
            <tr key={{ '{' }}{{ row_key }}{{ '}' }}>
{% for column in columns %}
              <td>{formatValue(item{{ column.access }})}</td>
{% endfor %}
              {hasActions && (
                <td>
                  {onView && (
                    <button type="button" onClick={() => onView(item)}>
                      View
                    </button>
                  )}
                  {onEdit && (
                    <button type="button" onClick={() => onEdit(item)}>
                      Edit
                    </button>
                  )}
                  {onDelete && (
                    <button type="button" onClick={() => onDelete(item)}>
                      Delete
                    </button>
                  )}
                </td>
              )}
            </tr>
          ))}
        </tbody>
      </table>
      {pageCount !== undefined && pageCount > 1 && onPageChange && (
        <div className="pagination">
          <button type="button" disabled={page <= 1} onClick={() => onPageChange(page - 1)}>
            Previous
          </button>
          <span>
            Page {page} of {pageCount}
          </span>
          <button type="button" disabled={page >= pageCount} onClick={() => onPageChange(page + 1)}>
            Next
          </button>
        </div>
      )}
    </div>
  );
}
"""

    card_component = """import React from 'react';
import type { {{ name }} } from '{{ type_path }}';

export interface {{ name }}CardProps {
  item: {{ name }};
  onEdit?: (item: {{ name }}) => void;
  onDelete?: (item: {{ name }}) => void;
}

function formatValue(value: unknown): string {
  if (value === null || value === undefined) {
    return '';
  }
  if (typeof value === 'object') {
    return JSON.stringify(value);
  }
  return String(value);
}

export function {{ name }}Card({ item, onEdit, onDelete }: {{ name }}CardProps) {
  return (
    <div className="{{ css }}-card">
      <dl>
{% for field in fields %}
        <dt>{{ field.label }}</dt>
        <dd>{formatValue(item{{ field.access }})}</dd>
{% endfor %}
      </dl>
      {(onEdit || onDelete) && (
        <div className="card-actions">
          {onEdit && (
            <button type="button" onClick={() => onEdit(item)}>
              Edit
            </button>
          )}
          {onDelete && (
            <button type="button" onClick={() => onDelete(item)}>
              Delete
            </button>
          )}
        </div>
      )}
    </div>
  );
}
"""

    form_component = """import React from 'react';
import { useForm } from 'react-hook-form';
import type { DefaultValues } from 'react-hook-form';
import { zodResolver } from '@hookform/resolvers/zod';
import type { {{ name }} } from '{{ type_path }}';
import { {{ name }}Schema } from '{{ schema_path }}';

export interface {{ component }}Props {
{% if mode == 'edit' %}
  initialValues: DefaultValues<{{ name }}>;
{% else %}
  initialValues?: DefaultValues<{{ name }}>;
{% endif %}
  onSubmit: (data: {{ name }}) => void | Promise<void>;
  onCancel?: () => void;
  submitLabel?: string;
}

export function {{ component }}({
  initialValues,
  onSubmit,
  onCancel,
  submitLabel = '{{ submit_label }}',
}: {{ component }}Props) {
  const { register, handleSubmit, formState } = useForm<{{ name }}>({
    resolver: zodResolver({{ name }}Schema),
    defaultValues: initialValues,
  });
  const errors = formState.errors;

  return (
    <form className="{{ css }}-form" onSubmit={handleSubmit(onSubmit)}>
{% for field in fields %}
      <div className="form-field">
{% if field.widget == 'checkbox' %}
        <label htmlFor="{{ field.id }}">
          <input id="{{ field.id }}" type="checkbox" {...register({{ field.key }})} />
          {{ field.label }}
        </label>
{% elif field.widget == 'select' %}
        <label htmlFor="{{ field.id }}">{{ field.label }}{% if field.required %} *{% endif %}</label>
        <select id="{{ field.id }}" {...register({{ field.key }})}{% if field.required %} required{% endif %}>
{% if not field.required %}
          <option value="">--</option>
{% endif %}
{% for option in field.options %}
          <option value={{ option.value }}>{{ option.label }}</option>
{% endfor %}
        </select>
{% else %}
        <label htmlFor="{{ field.id }}">{{ field.label }}{% if field.required %} *{% endif %}</label>
        <input
          id="{{ field.id }}"
          type="{{ field.widget }}"
          {...register({{ field.key }}{% if field.numeric %}, { valueAsNumber: true }{% endif %})}
{% if field.required %}
          required
{% endif %}
        />
{% endif %}
        {errors{{ field.access }} && <span className="form-error">{String(errors{{ field.access }}?.message ?? '')}</span>}
      </div>
{% endfor %}
      <div className="form-actions">
        <button type="submit" disabled={formState.isSubmitting}>
          {submitLabel}
        </button>
        {onCancel && (
          <button type="button" onClick={onCancel}>
            Cancel
          </button>
        )}
      </div>
    </form>
  );
}
"""

    fake_utils = """const BASE_DATE = Date.UTC(2024, 0, 15, 10, 0, 0);

export const PERSON_NAMES = ['Alice Johnson', 'Bob Smith', 'Carol White', 'David Brown', 'Eva Green'];
export const COMPANY_NAMES = ['Acme Corp', 'Globex', 'Initech', 'Umbrella Inc', 'Stark Industries'];
export const PRODUCT_NAMES = ['Widget Pro', 'Gadget Max', 'Gizmo Lite', 'Doohickey Plus', 'Thingamajig'];
export const CITIES = ['Berlin', 'Lisbon', 'Oslo', 'Prague', 'Vienna'];
export const COUNTRIES = ['Germany', 'Portugal', 'Norway', 'Czechia', 'Austria'];
export const LOREM = 'lorem ipsum dolor sit amet consectetur adipiscing elit sed do eiusmod tempor incididunt ut labore et dolore magna aliqua'.split(' ');

export function pick<T>(values: readonly T[]): T {
  return values[Math.floor(Math.random() * values.length)];
}

export function randomInt(min: number, max: number): number {
  return Math.floor(Math.random() * (max - min + 1)) + min;
}

export function randomNumber(min: number, max: number): number {
  return Math.round((Math.random() * (max - min) + min) * 100) / 100;
}

export function randomToken(length = 8): string {
  const alphabet = 'ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789';
  return Array.from({ length }, () => alphabet[Math.floor(Math.random() * alphabet.length)]).join('');
}

export function randomDate(daysBack = 90): string {
  return new Date(BASE_DATE - randomInt(0, daysBack) * 86400000).toISOString();
}

export function randomDay(daysBack = 90): string {
  return randomDate(daysBack).slice(0, 10);
}

export function randomEmail(): string {
  return `user${randomInt(1, 9999)}@example.com`;
}

export function randomUuid(): string {
  const hex = () => Math.floor(Math.random() * 16).toString(16);
  const block = (size: number) => Array.from({ length: size }, hex).join('');
  return `${block(8)}-${block(4)}-4${block(3)}-a${block(3)}-${block(12)}`;
}

export function randomPhone(): string {
  return `+1-555-${String(randomInt(0, 9999)).padStart(4, '0')}`;
}

export function lorem(words: number): string {
  const text = Array.from({ length: words }, () => pick(LOREM)).join(' ');
  return text.charAt(0).toUpperCase() + text.slice(1);
}
"""

    fixture_module = """{% if not value_import %}
import type { {{ name }} } from '{{ type_path }}';
{% else %}
import { {{ name }} } from '{{ type_path }}';
{% endif %}
import * as fake from './fake-utils';
{% for dep in imports %}
import { generate{{ dep.name }}FakeData } from './{{ dep.module }}.fake-data';
{% endfor %}

export const {{ name }}FakeData: {{ name }}[] = {{ fixtures }}{{ cast }};

export function generate{{ name }}FakeData(count = 1, depth = 0): {{ name }}[] {
  return Array.from({ length: count }, (_, index) => {{ factory }}){{ cast }};
}
"""

    mock_server = '''"""
Мок-сервер для {{ title }}

Запуск: python server.py (порт берется из переменной окружения PORT,
по умолчанию {{ port }}).
"""

import copy
import math
import os

from aiohttp import web

PORT = {{ port }}
DEFAULT_PER_PAGE = 20

ALLOWED_METHODS = "GET, POST, PUT, PATCH, DELETE, OPTIONS"

SPECIAL_STATUS_IDS = (201, 400, 401, 403, 404, 500)

ERROR_SENTINELS = {
    "VALIDATION": (400, "Validation failed for provided data"),
    "INVALID": (400, "Validation failed for provided data"),
    "UNAUTHORIZED": (401, "Authentication required"),
    "FORBIDDEN": (403, "Permission denied"),
    "NOT_FOUND": (404, "Resource not found"),
    "SERVER_ERROR": (500, "Internal server error"),
    "TIMEOUT": (504, "Request timed out"),
}

STATUS_MESSAGES = {
    400: (
        "Bad Request: The server could not understand the request"
        " due to invalid syntax"
    ),
    401: (
        "Unauthorized: Authentication is required and has failed"
        " or has not been provided"
    ),
    403: "Forbidden: You do not have permission to access this resource",
    404: "Not Found: The requested resource could not be found",
    500: "Internal Server Error: Something went wrong on the server",
}

STATUS_TITLES = {
    400: "Bad Request",
    401: "Unauthorized",
    403: "Forbidden",
    404: "Not Found",
    409: "Conflict",
    422: "Unprocessable Entity",
    500: "Internal Server Error",
    502: "Bad Gateway",
    503: "Service Unavailable",
    504: "Gateway Timeout",
}

SEED_DATA = {{ seed | pyrepr }}

ROUTES = {{ routes | pyrepr }}


def status_message(code):
    return STATUS_MESSAGES.get(code, f"Error with status code {code}")


def status_title(code):
    return STATUS_TITLES.get(code, "Error")


def _as_int(value):
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value)
    return None


def _positive_int(value, default):
    number = _as_int(value)
    return number if number is not None and number > 0 else default


def is_id_param(name):
    return name.lower() in ("id", "uuid") or name.endswith(("Id", "ID", "_id"))


def resolve_status(body, path_params, query):
    """Код ответа, запрошенный клиентом, и сообщение к нему.

    Порядок: id в теле, id-параметр пути, _error в теле, ?_status.
    """
    if isinstance(body, dict):
        code = _as_int(body.get("id"))
        if code in SPECIAL_STATUS_IDS:
            return code, status_message(code)

    for name, value in path_params.items():
        if is_id_param(name):
            code = _as_int(value)
            if code in SPECIAL_STATUS_IDS:
                return code, status_message(code)

    if isinstance(body, dict) and isinstance(body.get("_error"), str):
        sentinel = ERROR_SENTINELS.get(body["_error"].upper())
        if sentinel:
            return sentinel

    code = _as_int(query.get("_status"))
    if code is not None and 200 <= code <= 599:
        return code, status_message(code)

    return None


def success_response(data, status=200, message=None):
    if status == 204:
        return web.Response(status=204)
    payload = {"success": True, "data": data}
    if message:
        payload["message"] = message
    return web.json_response(payload, status=status)


def error_response(status, message=None):
    return web.json_response(
        {
            "success": False,
            "error": status_title(status),
            "message": message or status_message(status),
            "statusCode": status,
        },
        status=status,
    )


def missing_response(status, data, message=None):
    # Явно запрошенный успешный статус важнее отсутствия записи
    if status is None:
        return error_response(404)
    return success_response(data, status, message)


def paginated_response(request, items, status=200):
    page = _positive_int(request.query.get("page"), 1)
    per_page = _positive_int(request.query.get("perPage"), DEFAULT_PER_PAGE)
    total = len(items)
    total_pages = math.ceil(total / per_page)

    start = (page - 1) * per_page
    data = items[start:start + per_page]

    base = request.path
    links = {
        "first": f"{base}?page=1&perPage={per_page}",
        "last": f"{base}?page={total_pages}&perPage={per_page}",
    }
    if page > 1:
        links["prev"] = f"{base}?page={page - 1}&perPage={per_page}"
    if page < total_pages:
        links["next"] = f"{base}?page={page + 1}&perPage={per_page}"

    return web.json_response(
        {
            "success": True,
            "data": data,
            "meta": {
                "total": total,
                "count": len(data),
                "perPage": per_page,
                "currentPage": page,
                "totalPages": total_pages,
                "links": links,
            },
        },
        status=status,
    )


class MockDataStore:
    """Записи в памяти, ключ: имя сущности"""

    def __init__(self, seed=None):
        self._data = copy.deepcopy(SEED_DATA if seed is None else seed)

    def all(self, entity):
        return self._data.setdefault(entity, [])

    def find(self, entity, field, value):
        for item in self.all(entity):
            if isinstance(item, dict) and str(item.get(field)) == str(value):
                return item
        return None

    def create(self, entity, payload):
        items = self.all(entity)
        record = dict(payload)
        if "id" not in record:
            numeric = [
                item["id"]
                for item in items
                if isinstance(item, dict) and _as_int(item.get("id")) is not None
            ]
            record["id"] = max((_as_int(i) for i in numeric), default=0) + 1
        items.append(record)
        return record

    def replace(self, entity, field, value, payload):
        items = self.all(entity)
        for position, item in enumerate(items):
            if isinstance(item, dict) and str(item.get(field)) == str(value):
                record = dict(payload)
                record.setdefault(field, item.get(field))
                items[position] = record
                return record
        return None

    def update(self, entity, field, value, payload):
        item = self.find(entity, field, value)
        if item is None:
            return None
        item.update(payload)
        return item

    def delete(self, entity, field, value):
        items = self.all(entity)
        for position, item in enumerate(items):
            if isinstance(item, dict) and str(item.get(field)) == str(value):
                del items[position]
                return True
        return False


STORE_KEY = web.AppKey("store", MockDataStore)


def make_handler(route):
    action = route["action"]
    entity = route["entity"]
    id_param = route["id_param"]
    lookup = route["lookup"]

    async def handler(request):
        store = request.app[STORE_KEY]

        body = None
        if request.body_exists:
            try:
                body = await request.json()
            except ValueError:
                return error_response(400, "Malformed JSON body")

        forced = resolve_status(body, dict(request.match_info), request.query)
        if forced is not None and forced[0] >= 400:
            return error_response(*forced)
        status = forced[0] if forced else None
        item_id = request.match_info.get(id_param) if id_param else None
        payload = body if isinstance(body, dict) else {}

        if action == "list":
            return paginated_response(request, store.all(entity), status or 200)

        if action == "single":
            items = store.all(entity)
            return success_response(items[0] if items else {}, status or 200)

        if action == "get":
            item = store.find(entity, lookup, item_id)
            if item is None:
                return missing_response(status, payload)
            return success_response(item, status or 200)

        if action == "create":
            created = store.create(entity, payload)
            return success_response(created, status or 201, "Created")

        if action in ("replace", "update"):
            if id_param is None:
                return success_response(payload, status or 200, "Updated")
            method = store.replace if action == "replace" else store.update
            item = method(entity, lookup, item_id, payload)
            if item is None:
                return missing_response(status, payload, "Updated")
            return success_response(item, status or 200, "Updated")

        if action == "delete":
            if id_param is not None and not store.delete(entity, lookup, item_id):
                return missing_response(status, None, "Deleted")
            return success_response(None, status or 204, "Deleted")

        return error_response(500, f"Unknown action {action}")

    return handler


@web.middleware
async def cors_middleware(request, handler):
    if request.method == "OPTIONS":
        response = web.Response(status=204)
    else:
        response = await handler(request)
    response.headers["Access-Control-Allow-Origin"] = "*"
    response.headers["Access-Control-Allow-Methods"] = ALLOWED_METHODS
    response.headers["Access-Control-Allow-Headers"] = "Content-Type, Authorization"
    return response


def create_app(seed=None):
    app = web.Application(middlewares=[cors_middleware])
    app[STORE_KEY] = MockDataStore(seed)
    for route in ROUTES:
        app.router.add_route(route["method"], route["path"], make_handler(route))
    return app


if __name__ == "__main__":
    web.run_app(create_app(), port=int(os.environ.get("PORT", PORT)))
'''

    mock_readme = """# Мок-сервер {{ title }}

```
pip install aiohttp
python server.py
```

Порт: переменная окружения `PORT`, по умолчанию {{ port }}.

## Маршруты

| Метод | Путь | Операция | Сущность |
|-------|------|----------|----------|
{% for route in routes %}
| {{ route.method }} | `{{ route.path }}` | {{ route.operation }} | {{ route.entity }} |
{% endfor %}

## Управление кодом ответа

- `id` в теле запроса или id-параметр пути из набора 201, 400, 401, 403, 404, 500
  возвращает ответ с этим кодом.
- `_error` в теле: `VALIDATION`/`INVALID` 400, `UNAUTHORIZED` 401, `FORBIDDEN` 403,
  `NOT_FOUND` 404, `SERVER_ERROR` 500, `TIMEOUT` 504.
- `?_status=<code>` задает код в диапазоне 200..599.

Списки поддерживают `?page=&perPage=` (по умолчанию 20 записей на страницу).
"""


templates = Templates()


def _pyrepr(value: Any) -> str:
    return pprint.pformat(value, indent=4, width=88, sort_dicts=False)


class TemplateRenderer:
    """Рендер шаблонов по идентификатору.

    Встроенные шаблоны берутся из Templates, переопределения из
    конфигурации заменяют их по тому же идентификатору.
    """

    def __init__(self, overrides: Optional[Dict[str, str]] = None):
        sources = {
            name: value
            for name, value in vars(Templates).items()
            if not name.startswith("_") and isinstance(value, str)
        }
        sources.update(overrides or {})

        self.environment = Environment(
            loader=DictLoader(sources),
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            autoescape=False,
        )
        self.environment.filters["kebab"] = to_kebab_case
        self.environment.filters["pascal"] = to_pascal_case
        self.environment.filters["camel"] = to_camel_case
        self.environment.filters["pyrepr"] = _pyrepr
        self.environment.filters["ts_string"] = quote

    def render(self, template_id: str, variables: Dict[str, Any]) -> str:
        return self.environment.get_template(template_id).render(**variables)
