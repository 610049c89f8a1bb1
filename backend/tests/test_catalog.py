import uuid
from fastapi.testclient import TestClient
from education.main import app

client = TestClient(app)


def make_course(**extra):
    body = {'name': 'Agile coaching', 'organization': 'https://example.org/orgs/42', **extra}
    r = client.post('/courses', json=body)
    assert r.status_code == 201
    return r.json()


def test_health_and_request_id():
    r = client.get('/health')
    assert r.status_code == 200
    assert r.json() == {'status': 'ok'}
    assert r.headers.get('X-Request-ID')
    # a caller supplied id is echoed back
    r = client.get('/health', headers={'X-Request-ID': 'abc123'})
    assert r.headers['X-Request-ID'] == 'abc123'


def test_course_crud():
    course = make_course(skills=['facilitation', 'coaching'], additional_type='Elearning', text='long body')
    assert course['skills'] == ['facilitation', 'coaching']
    assert course['program_ids'] == []

    r = client.patch(f"/courses/{course['id']}", json={'description': 'updated'})
    assert r.status_code == 200
    assert r.json()['description'] == 'updated'
    assert r.json()['name'] == 'Agile coaching'

    assert client.delete(f"/courses/{course['id']}").status_code == 204
    assert client.get(f"/courses/{course['id']}").status_code == 404
    assert client.delete(f"/courses/{course['id']}").status_code == 404


def test_course_requires_organization():
    r = client.post('/courses', json={'name': 'No org'})
    assert r.status_code == 422


def test_course_filters():
    org = f'https://example.org/orgs/{uuid.uuid4()}'
    make_course(organization=org, additional_type='Elearning')
    make_course(organization=org, additional_type='Classroom')
    r = client.get('/courses', params={'organization': org, 'additional_type': 'elearning'})
    assert r.status_code == 200
    assert [c['additional_type'] for c in r.json()] == ['Elearning']


def test_program_links_courses():
    a = make_course(name='A')
    b = make_course(name='B')
    r = client.post('/programs', json={
        'name': 'Scrum master track',
        'provider': 'ACME Academy',
        'program_prerequisites': ['none'],
        'course_ids': [a['id'], b['id']],
    })
    assert r.status_code == 201
    program = r.json()
    assert sorted(program['course_ids']) == sorted([a['id'], b['id']])
    assert client.get(f"/courses/{a['id']}").json()['program_ids'] == [program['id']]

    r = client.patch(f"/programs/{program['id']}", json={'course_ids': [b['id']]})
    assert r.json()['course_ids'] == [b['id']]
    # other fields untouched by a link-only patch
    assert r.json()['provider'] == 'ACME Academy'

    r = client.post('/programs', json={'name': 'Broken', 'course_ids': [str(uuid.uuid4())]})
    assert r.status_code == 400


def test_program_provider_filter_is_case_insensitive():
    provider = f'Provider {uuid.uuid4()}'
    client.post('/programs', json={'name': 'P1', 'provider': provider})
    r = client.get('/programs', params={'provider': provider.upper()})
    assert [p['name'] for p in r.json()] == ['P1']


def test_program_date_range_validated():
    r = client.post('/programs', json={
        'name': 'Backwards',
        'start_date': '2024-06-01T00:00:00',
        'end_date': '2024-01-01T00:00:00',
    })
    assert r.status_code == 400
    assert 'start_date' in r.json()['detail']


def test_occupational_program_crud():
    r = client.post('/educational_occupational_programs', json={
        'name': 'Welding',
        'application_start_date': '2024-01-01',
        'application_deadline': '2024-02-01',
        'program_prerequisites': 'none',
    })
    assert r.status_code == 201
    pid = r.json()['id']
    assert r.json()['application_deadline'] == '2024-02-01'
    r = client.patch(f'/educational_occupational_programs/{pid}', json={'application_deadline': '2023-12-01'})
    assert r.status_code == 400
    assert client.delete(f'/educational_occupational_programs/{pid}').status_code == 204
    assert client.get(f'/educational_occupational_programs/{pid}').status_code == 404


def test_activities_belong_to_course():
    course = make_course()
    r = client.post('/activities', json={'name': 'Retrospective', 'course_id': course['id']})
    assert r.status_code == 201
    assert r.json()['needs_review'] is False
    listed = client.get(f"/courses/{course['id']}/activities").json()
    assert [a['name'] for a in listed] == ['Retrospective']

    r = client.post('/activities', json={'name': 'Orphan', 'course_id': str(uuid.uuid4())})
    assert r.status_code == 400


def test_deleting_course_removes_activities():
    course = make_course()
    activity = client.post('/activities', json={'name': 'Standup', 'course_id': course['id']}).json()
    client.delete(f"/courses/{course['id']}")
    assert client.get(f"/activities/{activity['id']}").status_code == 404


def test_pagination():
    org = f'https://example.org/orgs/{uuid.uuid4()}'
    for n in range(5):
        make_course(name=f'course {n}', organization=org)
    page1 = client.get('/courses', params={'organization': org, 'items_per_page': 2}).json()
    page3 = client.get('/courses', params={'organization': org, 'items_per_page': 2, 'page': 3}).json()
    assert [c['name'] for c in page1] == ['course 0', 'course 1']
    assert [c['name'] for c in page3] == ['course 4']
    assert client.get('/courses', params={'page': 0}).status_code == 422


def test_unknown_ids_and_malformed_ids():
    assert client.get(f'/programs/{uuid.uuid4()}').status_code == 404
    assert client.get('/programs/not-a-uuid').status_code == 422


def test_patch_cannot_clear_required_fields():
    course = make_course()
    activity = client.post('/activities', json={'name': 'Review', 'course_id': course['id']}).json()
    r = client.patch(f"/activities/{activity['id']}", json={'course_id': None})
    assert r.status_code == 400
    assert 'course_id' in r.json()['detail']
    assert client.patch(f"/activities/{activity['id']}", json={'needs_review': None}).status_code == 400
    assert client.patch(f"/courses/{course['id']}", json={'organization': None, 'name': None}).status_code == 400
    assert client.get(f"/courses/{course['id']}").json()['organization'] == 'https://example.org/orgs/42'


def test_naive_and_aware_dates_are_both_accepted():
    r = client.post('/programs', json={
        'name': 'Mixed zones',
        'start_date': '2024-01-10T05:00:00+02:00',
        'end_date': '2024-01-10T04:00:00',
    })
    assert r.status_code == 201
    # 05:00Z is after 06:00+02:00 (04:00Z)
    r = client.post('/programs', json={
        'name': 'Backwards across zones',
        'start_date': '2024-01-10T05:00:00Z',
        'end_date': '2024-01-10T06:00:00+02:00',
    })
    assert r.status_code == 400
