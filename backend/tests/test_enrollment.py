import uuid
from fastapi.testclient import TestClient
from education.main import app

client = TestClient(app)


def make_course():
    r = client.post('/courses', json={'name': 'Kanban', 'organization': 'https://example.org/orgs/7'})
    assert r.status_code == 201
    return r.json()


def make_group(course_id, **extra):
    return client.post('/groups', json={'name': 'Cohort', 'course_id': course_id, **extra})


def enroll(person, **extra):
    return client.post('/participants', json={'person': person, **extra})


def test_accepted_participant_gets_acceptance_date():
    course = make_course()
    pending = enroll('https://example.org/people/1', course_id=course['id'], status='pending').json()
    assert pending['date_of_acceptance'] is None

    accepted = enroll('https://example.org/people/2', course_id=course['id'], status='accepted').json()
    assert accepted['date_of_acceptance'] is not None

    r = client.patch(f"/participants/{pending['id']}", json={'status': 'accepted'})
    assert r.status_code == 200
    assert r.json()['date_of_acceptance'] is not None


def test_participant_validation():
    assert enroll('p', status='maybe').status_code == 422
    assert enroll('p', course_id=str(uuid.uuid4())).status_code == 400
    assert client.post('/participants', json={}).status_code == 422


def test_participant_filters_and_order():
    course = make_course()
    first = enroll('https://example.org/people/a', course_id=course['id'], status='accepted').json()
    second = enroll('https://example.org/people/b', course_id=course['id'], status='rejected').json()

    r = client.get('/participants', params={'course_id': course['id']})
    assert [p['id'] for p in r.json()] == [first['id'], second['id']]
    r = client.get('/participants', params={'course_id': course['id'], 'order': 'desc'})
    assert [p['id'] for p in r.json()] == [second['id'], first['id']]
    r = client.get('/participants', params={'course_id': course['id'], 'status': 'rejected'})
    assert [p['id'] for p in r.json()] == [second['id']]


def test_group_capacity_enforced():
    course = make_course()
    group = make_group(course['id'], max_participations=1).json()
    assert group['participant_count'] == 0

    ok = enroll('https://example.org/people/x', participant_group_id=group['id'])
    assert ok.status_code == 201
    full = enroll('https://example.org/people/y', participant_group_id=group['id'])
    assert full.status_code == 400

    # re-saving an existing member does not count it twice
    r = client.patch(f"/participants/{ok.json()['id']}", json={'motivation': 'keen'})
    assert r.status_code == 200

    members = client.get(f"/groups/{group['id']}/participants").json()
    assert [m['id'] for m in members] == [ok.json()['id']]
    assert client.get(f"/groups/{group['id']}").json()['participant_count'] == 1

    r = client.patch(f"/groups/{group['id']}", json={'max_participations': 0})
    assert r.status_code == 400


def test_group_rules():
    course = make_course()
    r = make_group(course['id'], min_participations=5, max_participations=2)
    assert r.status_code == 400
    r = make_group(course['id'], start_date='2024-05-01T00:00:00', end_date='2024-04-01T00:00:00')
    assert r.status_code == 400
    assert make_group(str(uuid.uuid4())).status_code == 400


def test_group_filters():
    course = make_course()
    make_group(course['id'], mentors=['https://example.org/people/Alice'], start_date='2024-01-10T00:00:00')
    make_group(course['id'], mentors=['https://example.org/people/bob'], start_date='2023-01-10T00:00:00')
    r = client.get('/groups', params={'course_id': course['id'], 'mentor': 'alice'})
    assert len(r.json()) == 1
    r = client.get('/groups', params={'course_id': course['id'], 'start_after': '2024-01-01T00:00:00'})
    assert r.json()[0]['mentors'] == ['https://example.org/people/Alice']


def test_deleting_group_keeps_participants():
    course = make_course()
    group = make_group(course['id']).json()
    member = enroll('https://example.org/people/z', participant_group_id=group['id']).json()
    assert client.delete(f"/groups/{group['id']}").status_code == 204
    r = client.get(f"/participants/{member['id']}")
    assert r.status_code == 200
    assert r.json()['participant_group_id'] is None


def test_education_event_participants():
    course = make_course()
    p1 = enroll('https://example.org/people/e1').json()
    p2 = enroll('https://example.org/people/e2').json()
    r = client.post('/education_events', json={
        'name': 'Kickoff',
        'course_id': course['id'],
        'participant_ids': [p1['id']],
    })
    assert r.status_code == 201
    event = r.json()
    assert event['participant_ids'] == [p1['id']]

    r = client.patch(f"/education_events/{event['id']}", json={'participant_ids': [p1['id'], p2['id']]})
    assert sorted(r.json()['participant_ids']) == sorted([p1['id'], p2['id']])

    r = client.patch(f"/education_events/{event['id']}", json={'participant_ids': [str(uuid.uuid4())]})
    assert r.status_code == 400


def test_results_and_reviews():
    course = make_course()
    activity = client.post('/activities', json={'name': 'Exam', 'course_id': course['id']}).json()
    participant = enroll('https://example.org/people/r').json()
    r = client.post('/results', json={
        'name': 'Exam result',
        'participant_id': participant['id'],
        'activity_id': activity['id'],
    })
    assert r.status_code == 201
    result = r.json()

    assert client.post('/reviews', json={'result_id': result['id'], 'rating': 6}).status_code == 422
    r = client.post('/reviews', json={'result_id': result['id'], 'rating': 4, 'body': 'Solid work'})
    assert r.status_code == 201
    review = r.json()
    listed = client.get('/reviews', params={'result_id': result['id']}).json()
    assert [rv['id'] for rv in listed] == [review['id']]

    # reviews go with their result, results with their participant
    client.delete(f"/participants/{participant['id']}")
    assert client.get(f"/results/{result['id']}").status_code == 404
    assert client.get(f"/reviews/{review['id']}").status_code == 404


def test_participant_patch_rejects_null_person():
    participant = enroll('https://example.org/people/n').json()
    r = client.patch(f"/participants/{participant['id']}", json={'person': None})
    assert r.status_code == 400
    r = client.patch(f"/participants/{participant['id']}", json={'motivation': None})
    assert r.status_code == 200


def test_group_dates_with_and_without_timezone():
    course = make_course()
    naive = make_group(course['id'], start_date='2024-03-01T00:00:00', end_date='2024-03-31T00:00:00')
    assert naive.status_code == 201
    aware = make_group(course['id'], start_date='2024-03-01T02:00:00+02:00', end_date='2024-03-02T00:00:00Z')
    assert aware.status_code == 201
    r = client.get('/groups', params={'course_id': course['id'], 'end_before': '2024-03-15T00:00:00'})
    assert [g['id'] for g in r.json()] == [aware.json()['id']]
    r = client.patch(f"/groups/{naive.json()['id']}", json={'end_date': '2024-02-01T00:00:00+00:00'})
    assert r.status_code == 400
