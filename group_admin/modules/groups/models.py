# Supabase tables: groups
# This file documents the expected database schema and the two functions the
# gateway calls over RPC. Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

groups:
- id: text (primary key)
- name: text (not null)
- users: text[] (nullable; read as an empty list when null)
- members: text[] (not null, default: '{}')
- created: timestamptz (nullable)

Set operations (one statement each, atomic per row, idempotent):

create or replace function group_array_union(
    p_table text, p_group_id text, p_field text, p_value text
) returns void language plpgsql as $$
begin
    if p_group_id is null then
        raise exception 'Group id is required';
    end if;
    if p_field not in ('users', 'members') then
        raise exception 'Unsupported field %', p_field;
    end if;
    execute format(
        'update %I set %I = array_append(coalesce(%I, ''{}''), $2)
         where id = $1 and not ($2 = any(coalesce(%I, ''{}'')))',
        p_table, p_field, p_field, p_field
    ) using p_group_id, p_value;
end;
$$;

create or replace function group_array_remove(
    p_table text, p_group_id text, p_field text, p_value text
) returns void language plpgsql as $$
begin
    if p_group_id is null then
        raise exception 'Group id is required';
    end if;
    if p_field not in ('users', 'members') then
        raise exception 'Unsupported field %', p_field;
    end if;
    execute format(
        'update %I set %I = array_remove(coalesce(%I, ''{}''), $2) where id = $1',
        p_table, p_field, p_field
    ) using p_group_id, p_value;
end;
$$;

A group id that matches no row updates nothing and both functions still
return normally.
"""

UNION_FUNCTION = "group_array_union"
REMOVE_FUNCTION = "group_array_remove"
